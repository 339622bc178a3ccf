"""
Shared fixtures for the PKCS12 converter tests
"""

import datetime
import os
import sys
import tempfile

import pytest

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Keep the module-level stores away from the working directory
os.environ.setdefault("EXPORT_DIR", tempfile.mkdtemp(prefix="p12_export_"))

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from certificates.types import MaterialKind, UploadedMaterial
from certificates.validation import InputValidator
from services.artifact_store import ArtifactStore
from services.bundle_assembler import BundleAssembler, Pkcs12Options
from services.p12_converter import P12ConverterService

START_TIME = 1_700_000_000.0
TTL_SECONDS = 3600


class FakeClock:
    """Settable stand-in for time.time"""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_key():
    return ec.generate_private_key(ec.SECP256R1())


def make_certificate(common_name, key, issuer_name=None, issuer_key=None, is_ca=False):
    subject = x509.Name([
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Example Test Org"),
        x509.NameAttribute(NameOID.COUNTRY_NAME, "CH"),
    ])
    now = datetime.datetime.now(datetime.timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer_name or subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=90))
        .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
    )
    if not is_ca:
        builder = builder.add_extension(
            x509.SubjectAlternativeName([x509.DNSName(common_name)]), critical=False
        )
    return builder.sign(issuer_key or key, hashes.SHA256())


def make_ca_chain(count):
    return [make_certificate(f"Test CA {i}", make_key(), is_ca=True) for i in range(count)]


def cert_pem(cert) -> bytes:
    return cert.public_bytes(serialization.Encoding.PEM)


def chain_pem(chain) -> bytes:
    return b"".join(cert_pem(cert) for cert in chain)


def key_pem(key) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )


def key_der(key) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )


def material(kind: MaterialKind, content, filename="upload.pem", declared_size=None) -> UploadedMaterial:
    return UploadedMaterial(kind=kind, content=content, filename=filename, declared_size=declared_size)


@pytest.fixture
def leaf_key():
    return make_key()


@pytest.fixture
def leaf_cert(leaf_key):
    """Self-signed end-entity certificate"""
    return make_certificate("test.example.com", leaf_key)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path, clock):
    return ArtifactStore(
        export_dir=str(tmp_path / "export"),
        export_url_path="/export",
        base_url="http://certs.example.test",
        ttl_seconds=TTL_SECONDS,
        clock=clock,
    )


@pytest.fixture
def validator():
    return InputValidator(
        max_cert_size=4096,
        max_key_size=4096,
        max_calist_size=32768,
        max_passphrase_length=40,
    )


@pytest.fixture
def assembler():
    return BundleAssembler(Pkcs12Options())


@pytest.fixture
def converter(validator, assembler, store):
    return P12ConverterService(validator=validator, assembler=assembler, store=store)
