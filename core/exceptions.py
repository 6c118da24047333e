"""
Nesting - Exceptions
====================
Exception hierarchy shared by the nesting engine, adapters and exporters.
"""


class NestingError(Exception):
    """Base exception for all nesting errors"""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"[{self.code}] {self.message} | Details: {self.details}"
        return f"[{self.code}] {self.message}"


# ============================================================
# Configuration Errors
# ============================================================

class ConfigurationError(NestingError):
    """Stock sheet configuration leaves no usable area"""

    def __init__(self, field: str, value, reason: str = None):
        msg = f"Invalid stock sheet setting '{field}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(
            msg,
            code="CONFIGURATION_ERROR",
            details={"field": field, "value": value, "reason": reason}
        )


# ============================================================
# Validation Errors
# ============================================================

class ValidationError(NestingError):
    """Input data validation errors"""
    pass


class RequiredFieldError(ValidationError):
    """Required field is missing"""

    def __init__(self, field: str, entity_type: str = None):
        msg = f"Field '{field}' is required"
        if entity_type:
            msg = f"{entity_type}: {msg}"
        super().__init__(msg, code="REQUIRED_FIELD", details={"field": field})


class InvalidFieldValueError(ValidationError):
    """Field has an unusable value"""

    def __init__(self, field: str, value, reason: str = None):
        msg = f"Invalid value for field '{field}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(
            msg,
            code="INVALID_FIELD_VALUE",
            details={"field": field, "value": str(value), "reason": reason}
        )


class InvalidPieceError(ValidationError):
    """Piece cannot take part in packing (excluded, run continues)"""

    def __init__(self, piece_id: str, reason: str):
        super().__init__(
            f"Piece '{piece_id}' excluded: {reason}",
            code="INVALID_PIECE",
            details={"piece_id": piece_id, "reason": reason}
        )
        self.piece_id = piece_id
        self.reason = reason


# ============================================================
# Export Errors
# ============================================================

class ExportError(NestingError):
    """Writing a diagram or cut file failed"""

    def __init__(self, path: str, reason: str = None):
        super().__init__(
            f"Failed to export: {path}" + (f" - {reason}" if reason else ""),
            code="EXPORT_ERROR",
            details={"path": path, "reason": reason}
        )
