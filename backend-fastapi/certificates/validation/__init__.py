# certificates/validation/__init__.py

from .input_validator import InputValidator
from .private_key_cert import validate_private_key_certificate_match

__all__ = [
    'InputValidator',
    'validate_private_key_certificate_match'
]
