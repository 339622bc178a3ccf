# certificates/extractors/certificate.py
# Display-ready certificate summaries for converter responses

import datetime
import logging
from typing import Any, Dict, List, cast

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import ExtensionOID, NameOID

logger = logging.getLogger(__name__)

NAME_FIELDS = {
    NameOID.COMMON_NAME: "common_name",
    NameOID.ORGANIZATION_NAME: "organization",
    NameOID.ORGANIZATIONAL_UNIT_NAME: "organizational_unit",
    NameOID.LOCALITY_NAME: "locality",
    NameOID.STATE_OR_PROVINCE_NAME: "state",
    NameOID.COUNTRY_NAME: "country",
    NameOID.EMAIL_ADDRESS: "email",
}

def extract_name_fields(name: x509.Name) -> Dict[str, str]:
    """Map the common distinguished name attributes to flat keys"""
    fields = {key: "N/A" for key in NAME_FIELDS.values()}
    for attribute in name:
        key = NAME_FIELDS.get(attribute.oid)
        if key:
            fields[key] = str(attribute.value)
    return fields

def extract_public_key_details(public_key) -> Dict[str, Any]:
    """Extract algorithm and size from a public key"""
    details: Dict[str, Any] = {"algorithm": "Unknown", "key_size": None}

    if isinstance(public_key, rsa.RSAPublicKey):
        details["algorithm"] = "RSA"
        details["key_size"] = public_key.key_size
        details["exponent"] = public_key.public_numbers().e
    elif isinstance(public_key, ec.EllipticCurvePublicKey):
        details["algorithm"] = "EC"
        details["key_size"] = public_key.curve.key_size
        details["curve"] = public_key.curve.name
    else:
        details["algorithm"] = type(public_key).__name__.replace("PublicKey", "").lstrip("_")
        details["key_size"] = getattr(public_key, "key_size", None)

    return details

def extract_subject_alt_names(cert: x509.Certificate) -> List[str]:
    try:
        san_ext = cert.extensions.get_extension_for_oid(ExtensionOID.SUBJECT_ALTERNATIVE_NAME)
    except x509.ExtensionNotFound:
        return []

    san_list = []
    for name in cast(x509.SubjectAlternativeName, san_ext.value):
        if isinstance(name, x509.DNSName):
            san_list.append(f"DNS:{name.value}")
        elif isinstance(name, x509.IPAddress):
            san_list.append(f"IP:{name.value}")
        elif isinstance(name, x509.RFC822Name):
            san_list.append(f"Email:{name.value}")
        elif isinstance(name, x509.UniformResourceIdentifier):
            san_list.append(f"URI:{name.value}")
        else:
            san_list.append(f"Other:{name}")
    return san_list

def is_ca_certificate(cert: x509.Certificate) -> bool:
    """Check the Basic Constraints CA flag"""
    try:
        basic_constraints_ext = cert.extensions.get_extension_for_oid(ExtensionOID.BASIC_CONSTRAINTS)
    except x509.ExtensionNotFound:
        return False
    return cast(x509.BasicConstraints, basic_constraints_ext.value).ca

def extract_certificate_metadata(cert: x509.Certificate) -> Dict[str, Any]:
    """Flattened certificate summary: names, validity, fingerprint, key and extensions"""
    logger.debug(f"=== CERTIFICATE METADATA EXTRACTION ===")

    now = datetime.datetime.now(datetime.timezone.utc)
    not_after = cert.not_valid_after_utc
    public_key_details = extract_public_key_details(cert.public_key())

    metadata: Dict[str, Any] = {
        "subject": cert.subject.rfc4514_string(),
        "issuer": cert.issuer.rfc4514_string(),
        "subject_fields": extract_name_fields(cert.subject),
        "issuer_fields": extract_name_fields(cert.issuer),
        "serial_number": str(cert.serial_number),
        "version": cert.version.name,
        "not_valid_before": cert.not_valid_before_utc.isoformat(),
        "not_valid_after": not_after.isoformat(),
        "is_expired": now > not_after,
        "days_until_expiry": (not_after - now).days,
        "is_ca": is_ca_certificate(cert),
        "is_self_signed": cert.subject == cert.issuer,
        "fingerprint_sha256": cert.fingerprint(hashes.SHA256()).hex().upper(),
        "signature_algorithm": cert.signature_algorithm_oid.dotted_string,
        "public_key_algorithm": public_key_details["algorithm"],
        "public_key_size": public_key_details["key_size"],
        "subject_alt_name": extract_subject_alt_names(cert),
    }

    sig_hash = cert.signature_hash_algorithm
    if sig_hash is not None:
        metadata["signature_hash"] = sig_hash.name
    if "curve" in public_key_details:
        metadata["public_key_curve"] = public_key_details["curve"]

    logger.debug(f"Certificate metadata extracted for {metadata['subject']}")
    return metadata
