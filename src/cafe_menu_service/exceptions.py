"""Exceptions raised across the menu service boundary.

Stage-local problems (transport errors, empty or corrupted results) never show
up here; adapters report them by returning None and the orchestrator swallows
them. Only a fully exhausted acquisition run becomes an exception.
"""


class MenuServiceError(Exception):
    """Base class for menu service errors."""


class AcquisitionFailure(MenuServiceError):
    """Every acquisition stage failed or produced unusable data."""

    def __init__(self, message: str, failures: list[str] | None = None) -> None:
        super().__init__(message)
        self.failures = failures or []


class NoDataAvailable(AcquisitionFailure):
    """Acquisition failed and there is no cached menu to fall back on."""


class UnknownToolError(MenuServiceError):
    """A tool call named a tool that does not exist."""
