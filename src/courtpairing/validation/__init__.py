from courtpairing.validation.round_checker import (
    CheckResult,
    CheckStatus,
    RoundChecker,
    Severity,
    ValidationReport,
)

__all__ = [
    "CheckResult",
    "CheckStatus",
    "RoundChecker",
    "Severity",
    "ValidationReport",
]
