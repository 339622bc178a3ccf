# certificates/validation/input_validator.py
# Presence and size checks run before any upload is decoded

import logging
from typing import Dict, Optional

from config import settings
from ..exceptions import InputMissing, SizeExceeded
from ..types import MaterialKind, Passphrase, UploadedMaterial

logger = logging.getLogger(__name__)


class InputValidator:
    """Checks uploads against the configured size ceilings"""

    def __init__(
        self,
        max_cert_size: Optional[int] = None,
        max_key_size: Optional[int] = None,
        max_calist_size: Optional[int] = None,
        max_passphrase_length: Optional[int] = None,
    ):
        calist_limit = max_calist_size or settings.MAX_CALIST_SIZE
        self.limits: Dict[MaterialKind, int] = {
            MaterialKind.CERTIFICATE: max_cert_size or settings.MAX_CERT_SIZE,
            MaterialKind.PRIVATE_KEY: max_key_size or settings.MAX_KEY_SIZE,
            MaterialKind.CA_LIST: calist_limit,
            MaterialKind.BUNDLE: calist_limit,
        }
        self.max_passphrase_length = max_passphrase_length or settings.MAX_PASSPHRASE_LENGTH

    def limit_for(self, kind: MaterialKind) -> int:
        return self.limits[kind]

    def validate(self, material: Optional[UploadedMaterial], kind: MaterialKind) -> UploadedMaterial:
        """
        Validate a required upload

        Raises:
            InputMissing: no upload, or an upload with zero bytes
            SizeExceeded: declared or actual size above the ceiling for kind
        """
        label = material.label if material else kind.field_name
        if material is None or material.content is None:
            logger.info(f"Required upload missing: {kind.field_name}")
            raise InputMissing(kind.field_name, f"Could not get the {label}, the field is required")

        if material.size == 0 or len(material.content) == 0:
            logger.info(f"Upload is empty: {kind.field_name}")
            raise InputMissing(kind.field_name, f"The uploaded {label} is empty (0 bytes)")

        limit = self.limit_for(kind)
        if material.size > limit or len(material.content) > limit:
            logger.info(f"Upload too large: {kind.field_name} ({material.size} > {limit} bytes)")
            raise SizeExceeded(kind.field_name, f"The uploaded {label} is greater than {limit} bytes")

        logger.debug(f"Validated {kind.field_name}: {material.size} bytes, filename={material.filename!r}")
        return material

    def validate_optional(self, material: Optional[UploadedMaterial], kind: MaterialKind) -> Optional[UploadedMaterial]:
        """Validate an optional upload; an unnamed empty upload counts as not supplied"""
        if material is None or (not material.filename and not material.content):
            logger.debug(f"Optional upload {kind.field_name} not supplied")
            return None
        return self.validate(material, kind)

    def validate_passphrase(self, raw: Optional[str]) -> Passphrase:
        if not raw:
            raise InputMissing("p12pass", "Error retrieving mandatory PKCS12 passphrase")

        if len(raw.encode("utf-8")) > self.max_passphrase_length:
            raise SizeExceeded(
                "p12pass",
                f"The PKCS12 passphrase can be up to {self.max_passphrase_length} characters"
            )
        return Passphrase(raw)
