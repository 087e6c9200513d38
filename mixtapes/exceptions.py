"""Exception types raised by the mixtape importer."""

from typing import Optional


class MixtapeError(Exception):
    """Base class for importer errors."""


class FetchError(MixtapeError):
    """A page could not be fetched (transport failure or non-2xx status)."""

    def __init__(self, url: str, status: Optional[int] = None,
                 cause: Optional[BaseException] = None) -> None:
        self.url = url
        self.status = status
        self.cause = cause
        if status is not None:
            message = f"Failed to fetch {url}: HTTP {status}"
        elif cause is not None:
            message = f"Failed to fetch {url}: {cause}"
        else:
            message = f"Failed to fetch {url}"
        super().__init__(message)


class ParseError(MixtapeError):
    """A persisted record file could not be parsed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not parse {path}: {reason}")
