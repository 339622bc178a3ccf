# certificates/validation/models.py
# Result type for key/certificate comparisons

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class KeyMatchResult:
    """Outcome of comparing a private key with a certificate public key"""
    is_valid: bool
    validation_type: str
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
