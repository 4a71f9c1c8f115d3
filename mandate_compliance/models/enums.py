from enum import Enum


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        """0 for CRITICAL up to 3 for LOW; sort ascending to put CRITICAL first."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


class ViolationKind(str, Enum):
    ANTI_PATTERN = "ANTI_PATTERN"
    MISSING_REFERENCE = "MISSING_REFERENCE"


class RequestCategory(str, Enum):
    """Categories shipped with the built-in classification table."""
    EMPTY_INPUT = "EMPTY_INPUT"
    SECURITY = "SECURITY"
    DEBUG = "DEBUG"
    REFACTOR = "REFACTOR"
    PERFORMANCE = "PERFORMANCE"
    TESTING = "TESTING"
    DOCUMENTATION = "DOCUMENTATION"
    NEW_FEATURE = "NEW_FEATURE"
