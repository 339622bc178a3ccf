# certificates/formats/pkcs12.py
# Structural decoding of uploaded PKCS12 files

import logging

from ..exceptions import ParseFailure
from ..types import MaterialKind, Pkcs12Bundle, UploadedMaterial

logger = logging.getLogger(__name__)

logger.debug("formats/pkcs12.py initialized")

ASN1_SEQUENCE = 0x30
ASN1_INDEFINITE_LENGTH = 0x80

def _outer_sequence_length(data: bytes):
    """
    Return the encoded size of the outer ASN.1 SEQUENCE, or None for the
    BER indefinite-length form.

    Raises ValueError if the header is not a well-formed SEQUENCE header.
    """
    if len(data) < 2:
        raise ValueError("content too short for an ASN.1 header")
    if data[0] != ASN1_SEQUENCE:
        raise ValueError(f"expected ASN.1 SEQUENCE (0x30), got 0x{data[0]:02x}")

    first = data[1]
    if first < ASN1_INDEFINITE_LENGTH:
        return 2 + first
    if first == ASN1_INDEFINITE_LENGTH:
        return None

    num_octets = first & 0x7F
    if num_octets > 4 or len(data) < 2 + num_octets:
        raise ValueError(f"unsupported length encoding ({num_octets} length octets)")
    length = int.from_bytes(data[2:2 + num_octets], "big")
    return 2 + num_octets + length

def decode_bundle(material: UploadedMaterial) -> Pkcs12Bundle:
    """Check the DER envelope structure and wrap it as an opaque bundle"""
    logger.debug(f"=== PKCS12 STRUCTURE DECODE ===")
    logger.debug(f"File content length: {len(material.content)} bytes")
    logger.debug(f"First 16 bytes (hex): {material.content[:16].hex()}")
    name = material.filename or "the PKCS12 file"

    try:
        encoded_size = _outer_sequence_length(material.content)
    except ValueError as e:
        logger.info(f"PKCS12 structure rejected for {material.filename!r}: {e}")
        raise ParseFailure(
            MaterialKind.BUNDLE.field_name,
            f"Error reading PKCS12 structure of {name} into memory"
        )

    if encoded_size is None:
        logger.debug("PKCS12 uses BER indefinite length encoding")
    elif encoded_size > len(material.content):
        logger.info(f"PKCS12 truncated: header declares {encoded_size} bytes, got {len(material.content)}")
        raise ParseFailure(
            MaterialKind.BUNDLE.field_name,
            f"Error reading PKCS12 structure of {name} into memory, the file is truncated"
        )
    elif encoded_size < len(material.content):
        logger.warning(f"PKCS12 has {len(material.content) - encoded_size} trailing bytes, ignoring them")
        return Pkcs12Bundle(data=material.content[:encoded_size], source_name=material.filename)

    return Pkcs12Bundle(data=material.content, source_name=material.filename)
