"""
Engine Exceptions Module.

Centralized exception definitions with:
- Error codes for caller handling
- Detailed error information

The engine clamps out-of-range numbers instead of raising; these errors
cover requests it cannot interpret at all (unknown parameter names, threat
levels or criteria, and nonsensical iteration counts or levels).
"""

from enum import Enum
from typing import Any, Dict, Optional


# ============================================================================
# ERROR CODES
# ============================================================================


class ErrorCode(str, Enum):
    """Engine error codes."""

    # General errors (1xxx)
    INTERNAL_ERROR = "E1000"
    VALIDATION_ERROR = "E1001"

    # Lookup errors (2xxx)
    UNKNOWN_PARAMETER = "E2000"
    UNKNOWN_THREAT_LEVEL = "E2001"
    UNKNOWN_CRITERION = "E2002"


# ============================================================================
# BASE EXCEPTION
# ============================================================================


class RiskQuantError(Exception):
    """Base exception for the RiskQuant engine."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        self.field = field
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form for reporting collaborators."""
        return {
            "code": self.code.value,
            "message": self.message,
            "field": self.field,
            "details": self.details,
        }


# ============================================================================
# SPECIFIC EXCEPTIONS
# ============================================================================


class InvalidInputError(RiskQuantError):
    """Input that cannot be corrected by clamping."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            field=field,
            details=details,
        )


class UnknownParameterError(RiskQuantError):
    """Parameter name the engine cannot override."""

    def __init__(self, parameter: str, allowed: tuple[str, ...]):
        super().__init__(
            message=f"Unknown risk parameter: {parameter}",
            code=ErrorCode.UNKNOWN_PARAMETER,
            field="parameter",
            details={"parameter": parameter, "allowed": list(allowed)},
        )


class UnknownThreatLevelError(RiskQuantError):
    """Threat level missing from the multiplier table."""

    def __init__(self, level: str, allowed: tuple[str, ...]):
        super().__init__(
            message=f"Unknown threat level: {level}",
            code=ErrorCode.UNKNOWN_THREAT_LEVEL,
            field="level",
            details={"level": level, "allowed": list(allowed)},
        )


class UnknownCriterionError(RiskQuantError):
    """Recommendation criterion the engine does not rank by."""

    def __init__(self, criterion: str, allowed: tuple[str, ...]):
        super().__init__(
            message=f"Unknown recommendation criterion: {criterion}",
            code=ErrorCode.UNKNOWN_CRITERION,
            field="criterion",
            details={"criterion": criterion, "allowed": list(allowed)},
        )
