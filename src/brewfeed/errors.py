"""Exception hierarchy for brewfeed.

Fetch failures (RemoteUnavailable, MalformedResponse) are caught by the
Orchestrator and trigger the snapshot fallback. PersistenceFailure is caught
and logged inside the SnapshotStore. Only NoDataSource reaches callers.
"""


class BrewfeedError(Exception):
    """Base exception for brewfeed."""


class FetchError(BrewfeedError):
    """Base exception for failures reading the remote source."""


class RemoteUnavailable(FetchError):
    """Network or transport failure talking to the remote source."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class MalformedResponse(FetchError):
    """The remote payload could not be parsed into records."""

    def __init__(self, message: str, response_body: str | None = None) -> None:
        super().__init__(message)
        self.response_body = response_body


class PersistenceFailure(BrewfeedError):
    """Snapshot read or write failed."""


class NoDataSource(BrewfeedError):
    """Neither the remote source nor the snapshot could supply records.

    Args:
        message: Human-readable description
        cause: The fetch error that triggered the fallback attempt
    """

    def __init__(
        self,
        message: str = "No data source available",
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.cause = cause
