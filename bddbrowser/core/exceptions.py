"""Exceptions raised by the scenario lifecycle."""


class BddBrowserError(Exception):
    """Base exception for bddbrowser failures."""


class ResourceAcquisitionError(BddBrowserError):
    """Raised when a browser, context or page cannot be created.

    Fatal to the scenario being set up; behave reports it as a hook error.
    """


class ReportPersistenceError(BddBrowserError):
    """Raised when the run report cannot be written to disk."""


class ScenarioStateError(BddBrowserError):
    """Raised when a recorder transition is attempted from the wrong phase."""


class RunStateError(BddBrowserError):
    """Raised when the run registry is used outside its initialized span."""
