"""Exceptions raised by the tracker core"""


class TrackerError(Exception):
    """Base exception for the tracker"""

    pass


class ValidationError(TrackerError):
    """Input rejected before it reached the store"""

    def __init__(self, error: dict):
        super().__init__(error.get("message", error.get("error", "invalid input")))
        self.error = error


class SeedDataError(TrackerError):
    """Sample data file is malformed or fails validation"""

    pass
