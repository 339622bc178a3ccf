# certificates/exceptions.py
# Error categories raised by the PKCS12 conversion pipeline

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    """User-facing failure classes"""
    INPUT_MISSING = "InputMissing"
    SIZE_EXCEEDED = "SizeExceeded"
    PARSE_FAILURE = "ParseFailure"
    CRYPTO_FAILURE = "CryptoFailure"
    IO_FAILURE = "IOFailure"
    NOT_FOUND = "NotFound"


class P12ConverterError(Exception):
    """Base exception for PKCS12 converter operations"""

    category: ErrorCategory
    status_code: int = 400

    def __init__(self, field: Optional[str], message: str):
        super().__init__(message)
        self.field = field
        self.message = message

    def to_dict(self):
        return {
            "success": False,
            "error": self.category.value,
            "field": self.field,
            "message": self.message,
        }


class InputMissing(P12ConverterError):
    """Raised when a required request field is absent or empty"""
    category = ErrorCategory.INPUT_MISSING
    status_code = 400


class SizeExceeded(P12ConverterError):
    """Raised when an upload is larger than its configured ceiling"""
    category = ErrorCategory.SIZE_EXCEEDED
    status_code = 413


class ParseFailure(P12ConverterError):
    """Raised when PEM/DER material cannot be decoded"""
    category = ErrorCategory.PARSE_FAILURE
    status_code = 422


class CryptoFailure(P12ConverterError):
    """Raised when the PKCS12 envelope cannot be built or opened"""
    category = ErrorCategory.CRYPTO_FAILURE
    status_code = 400


class IOFailure(P12ConverterError):
    """Raised when an artifact cannot be written or read"""
    category = ErrorCategory.IO_FAILURE
    status_code = 500


class NotFound(P12ConverterError):
    """Raised when an artifact has expired or never existed"""
    category = ErrorCategory.NOT_FOUND
    status_code = 404
