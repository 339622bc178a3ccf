# certificates/validation/private_key_cert.py
# Private Key <-> Certificate match check used before bundle assembly

import logging
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa, ec
from .models import KeyMatchResult

logger = logging.getLogger(__name__)

VALIDATION_TYPE = "Private Key <-> Certificate"

def validate_private_key_certificate_match(private_key, certificate: x509.Certificate) -> KeyMatchResult:
    """Validate that private key matches the public key in certificate"""
    logger.debug(f"=== PRIVATE KEY <-> CERTIFICATE VALIDATION ===")
    logger.debug(f"Private key type: {type(private_key).__name__}")

    try:
        private_public_key = private_key.public_key()
        cert_public_key = certificate.public_key()
    except Exception as e:
        logger.error(f"Could not extract public keys for comparison: {e}")
        return KeyMatchResult(is_valid=False, validation_type=VALIDATION_TYPE, error=str(e))

    if type(private_public_key) != type(cert_public_key):
        error_msg = (
            f"Algorithm mismatch: Private key has {type(private_public_key).__name__}, "
            f"Certificate has {type(cert_public_key).__name__}"
        )
        logger.warning(error_msg)
        return KeyMatchResult(is_valid=False, validation_type=VALIDATION_TYPE, error=error_msg)

    if isinstance(private_public_key, rsa.RSAPublicKey):
        return validate_rsa_keys(private_public_key, cert_public_key)
    elif isinstance(private_public_key, ec.EllipticCurvePublicKey):
        return validate_ec_keys(private_public_key, cert_public_key)
    return validate_encoded_keys(private_public_key, cert_public_key)

def validate_rsa_keys(private_public_key: rsa.RSAPublicKey, cert_public_key: rsa.RSAPublicKey) -> KeyMatchResult:
    """Validate RSA key pair using public_numbers() comparison"""
    private_numbers = private_public_key.public_numbers()
    cert_numbers = cert_public_key.public_numbers()

    modulus_match = private_numbers.n == cert_numbers.n
    exponent_match = private_numbers.e == cert_numbers.e
    logger.debug(f"RSA modulus match: {modulus_match}, exponent match: {exponent_match}")

    is_valid = modulus_match and exponent_match
    if is_valid:
        logger.info("RSA key validation (Private Key <-> Certificate): MATCH")
    else:
        logger.warning("RSA key validation (Private Key <-> Certificate): NO MATCH")

    return KeyMatchResult(
        is_valid=is_valid,
        validation_type=VALIDATION_TYPE,
        error=None if is_valid else "RSA modulus or exponent differs from the certificate public key",
        details={"algorithm": "RSA", "keySize": private_numbers.n.bit_length()}
    )

def validate_ec_keys(private_public_key: ec.EllipticCurvePublicKey, cert_public_key: ec.EllipticCurvePublicKey) -> KeyMatchResult:
    """Validate EC key pair using curve and public point comparison"""
    private_numbers = private_public_key.public_numbers()
    cert_numbers = cert_public_key.public_numbers()

    curve_match = private_public_key.curve.name == cert_public_key.curve.name
    point_match = private_numbers.x == cert_numbers.x and private_numbers.y == cert_numbers.y
    logger.debug(f"EC curve match: {curve_match}, point match: {point_match}")

    is_valid = curve_match and point_match
    if is_valid:
        logger.info("EC key validation (Private Key <-> Certificate): MATCH")
    else:
        logger.warning("EC key validation (Private Key <-> Certificate): NO MATCH")

    return KeyMatchResult(
        is_valid=is_valid,
        validation_type=VALIDATION_TYPE,
        error=None if is_valid else "EC curve or public point differs from the certificate public key",
        details={"algorithm": "EC", "curve": private_public_key.curve.name}
    )

def validate_encoded_keys(private_public_key, cert_public_key) -> KeyMatchResult:
    """Compare any other key type by its SubjectPublicKeyInfo encoding"""
    spki = serialization.PublicFormat.SubjectPublicKeyInfo
    der = serialization.Encoding.DER
    is_valid = private_public_key.public_bytes(der, spki) == cert_public_key.public_bytes(der, spki)
    algorithm = type(private_public_key).__name__.replace("PublicKey", "").lstrip("_")
    logger.debug(f"{algorithm} public key encoding match: {is_valid}")

    return KeyMatchResult(
        is_valid=is_valid,
        validation_type=VALIDATION_TYPE,
        error=None if is_valid else f"{algorithm} public key differs from the certificate public key",
        details={"algorithm": algorithm}
    )
