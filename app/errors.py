from __future__ import annotations


class FeedMergeError(Exception):
    """Base class for errors raised while building a merged feed."""


class InvalidInput(FeedMergeError):
    """The ``feeds`` token is present but does not decode to a list of URLs."""


class NoSourcesProvided(FeedMergeError):
    """No source URLs were left after resolving the request."""


class SourceUnavailable(FeedMergeError):
    """A single source could not be fetched or parsed."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class DetectionAmbiguous(FeedMergeError):
    """The format probe failed or did not identify a JSON Feed."""
