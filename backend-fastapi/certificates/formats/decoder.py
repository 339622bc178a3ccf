# certificates/formats/decoder.py
# Single entry point over the PEM and PKCS12 decoders

from typing import List, Optional

from cryptography import x509

from ..types import Pkcs12Bundle, UploadedMaterial
from . import pem, pkcs12


class MaterialDecoder:
    """Decodes validated uploads into cryptography objects"""

    def decode_certificate(self, material: UploadedMaterial) -> x509.Certificate:
        return pem.decode_certificate(material)

    def decode_private_key(self, material: UploadedMaterial):
        return pem.decode_private_key(material)

    def decode_ca_list(self, material: Optional[UploadedMaterial]) -> List[x509.Certificate]:
        return pem.decode_ca_list(material)

    def decode_bundle(self, material: UploadedMaterial) -> Pkcs12Bundle:
        return pkcs12.decode_bundle(material)
