"""Exceptions raised by subnetcheck."""


class SubnetCheckError(Exception):
    """Base exception for subnetcheck errors."""
    pass


class InvalidCIDR(SubnetCheckError, ValueError):
    """Raised for a malformed IPv4 address or an out-of-range prefix length."""

    def __init__(self, message: str, value=None):
        super().__init__(message)
        self.value = value


class EmptyInput(SubnetCheckError):
    """Raised when no UP interface records are left to analyze.

    The failed report is attached so callers can still render it.
    """

    def __init__(self, message: str, report=None):
        super().__init__(message)
        self.report = report


class IngestError(SubnetCheckError, ValueError):
    """Raised when a record file cannot be read or fails schema validation."""
    pass
