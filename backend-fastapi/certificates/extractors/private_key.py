import logging
from typing import Dict, Any
from cryptography.hazmat.primitives.asymmetric import rsa, ec, dsa, ed25519, ed448
from cryptography.hazmat.primitives import serialization
import hashlib

logger = logging.getLogger(__name__)

def extract_private_key_metadata(private_key) -> Dict[str, Any]:
    """
    Summarize a private key for display.

    Only public properties are reported: algorithm, size or curve, and a
    fingerprint of the matching public key. The private material itself is
    never included.
    """
    logger.debug(f"=== PRIVATE KEY METADATA EXTRACTION ===")
    logger.debug(f"Private key class name: {type(private_key).__name__}")

    public_bytes = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )

    metadata: Dict[str, Any] = {
        'algorithm': type(private_key).__name__.replace('PrivateKey', '').lstrip('_'),
        'key_size': getattr(private_key, 'key_size', None),
        'public_key_fingerprint': hashlib.sha256(public_bytes).hexdigest().upper()
    }

    if isinstance(private_key, rsa.RSAPrivateKey):
        metadata['algorithm'] = "RSA"
        metadata['key_size'] = private_key.key_size
        metadata['rsa_exponent'] = private_key.public_key().public_numbers().e
    elif isinstance(private_key, ec.EllipticCurvePrivateKey):
        metadata['algorithm'] = "EC"
        metadata['key_size'] = private_key.curve.key_size
        metadata['ec_curve'] = private_key.curve.name
    elif isinstance(private_key, dsa.DSAPrivateKey):
        metadata['algorithm'] = "DSA"
        metadata['key_size'] = private_key.key_size
    elif isinstance(private_key, ed25519.Ed25519PrivateKey):
        metadata['algorithm'] = "Ed25519"
        metadata['key_size'] = 256
    elif isinstance(private_key, ed448.Ed448PrivateKey):
        metadata['algorithm'] = "Ed448"
        metadata['key_size'] = 448
    else:
        logger.warning(f"Unknown private key type: {type(private_key)}")

    logger.debug(f"Private key metadata: algorithm={metadata['algorithm']}, size={metadata['key_size']}")
    return metadata
