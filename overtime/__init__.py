from .calculator import DEFAULT_HOURLY_RATE, OvertimeCalculator, calculate
from .models import OvertimeCalculation, OvertimeError, OvertimeErrorCode, ShiftInput, ValidationResult
from .rate_limit import RateLimiter
from .validation import validate, validate_shift

__all__ = [
    "DEFAULT_HOURLY_RATE",
    "OvertimeCalculator",
    "calculate",
    "OvertimeCalculation",
    "OvertimeError",
    "OvertimeErrorCode",
    "ShiftInput",
    "ValidationResult",
    "RateLimiter",
    "validate",
    "validate_shift",
]
