import uvicorn

from scripts import serve


def _capture_run(monkeypatch) -> list[tuple[tuple, dict]]:
    calls: list[tuple[tuple, dict]] = []
    monkeypatch.setattr(uvicorn, "run", lambda *a, **kw: calls.append((a, kw)))
    return calls


def test_serve_uses_settings_defaults(monkeypatch) -> None:
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "9100")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    calls = _capture_run(monkeypatch)

    serve.main([])

    assert calls == [
        (
            ("app.main:app",),
            {"host": "0.0.0.0", "port": 9100, "reload": False, "log_level": "warning"},
        )
    ]


def test_serve_flags_override_settings(monkeypatch) -> None:
    calls = _capture_run(monkeypatch)

    serve.main(["--host", "localhost", "--port", "8123", "--reload"])

    (args, kwargs), = calls
    assert args == ("app.main:app",)
    assert kwargs["host"] == "localhost"
    assert kwargs["port"] == 8123
    assert kwargs["reload"] is True
