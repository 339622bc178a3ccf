# certificates/types.py
# Request and result types shared by the PKCS12 conversion pipeline

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from cryptography import x509


class Command(str, Enum):
    """Supported converter commands"""
    CREATE = "create"
    ANALYZE = "analyze"


class MaterialKind(Enum):
    """Kinds of uploaded material, valued by their request field name"""
    CERTIFICATE = "certfile"
    PRIVATE_KEY = "keyfile"
    CA_LIST = "calist"
    BUNDLE = "p12file"

    @property
    def field_name(self) -> str:
        return self.value


class DisplayLabels:
    """Human-readable labels for uploaded material"""
    LABELS = {
        MaterialKind.CERTIFICATE: "certificate file",
        MaterialKind.PRIVATE_KEY: "private key file",
        MaterialKind.CA_LIST: "CA list file",
        MaterialKind.BUNDLE: "PKCS12 file",
    }

    @classmethod
    def get_label(cls, kind: MaterialKind) -> str:
        return cls.LABELS.get(kind, "upload")


@dataclass(frozen=True)
class UploadedMaterial:
    """Raw upload as captured from the request"""
    kind: MaterialKind
    content: Optional[bytes]
    filename: str = ""
    declared_size: Optional[int] = None

    @property
    def size(self) -> int:
        if self.declared_size is not None:
            return self.declared_size
        return len(self.content or b"")

    @property
    def label(self) -> str:
        return DisplayLabels.get_label(self.kind)


@dataclass(frozen=True)
class Passphrase:
    """Bundle secret; never rendered by repr() or str()"""
    value: str = field(repr=False)

    def encode(self) -> bytes:
        return self.value.encode("utf-8")

    def __str__(self) -> str:
        return "********"


@dataclass(frozen=True)
class Pkcs12Bundle:
    """Opaque PKCS12 envelope bytes"""
    data: bytes = field(repr=False)
    source_name: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class BundleContents:
    """Material recovered from an opened bundle"""
    certificate: x509.Certificate
    private_key: Any
    ca_chain: List[x509.Certificate]
    friendly_name: Optional[str] = None


@dataclass(frozen=True)
class Artifact:
    """A bundle staged in the export directory"""
    filename: str
    path: str
    created_at: float
    url: str
    size: int

    def to_dict(self, ttl_seconds: int) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "url": self.url,
            "created_at": self.created_at,
            "expires_at": self.created_at + ttl_seconds,
            "size": self.size,
        }


@dataclass(frozen=True)
class RequestContext:
    """Everything one converter invocation needs, built once per request"""
    command: str
    materials: Mapping[MaterialKind, UploadedMaterial] = field(default_factory=dict)
    passphrase: Optional[str] = field(default=None, repr=False)
    base_url: Optional[str] = None

    def material(self, kind: MaterialKind) -> Optional[UploadedMaterial]:
        return self.materials.get(kind)


@dataclass
class CreateResult:
    artifact: Artifact
    summary: Dict[str, Any]


@dataclass
class AnalyzeResult:
    filename: str
    size: int
    summary: Dict[str, Any]
