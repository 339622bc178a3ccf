"""
Tests for InputValidator - presence and size ceilings
"""

import pytest
import sys
import os
from unittest.mock import Mock

# Add the parent directory to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from certificates.exceptions import InputMissing, SizeExceeded
from certificates.formats import MaterialDecoder
from certificates.types import MaterialKind, Passphrase, RequestContext
from certificates.validation import InputValidator
from services.p12_converter import P12ConverterService

from conftest import material


class TestInputValidator:
    """Test suite for InputValidator"""

    def test_missing_required_upload(self, validator):
        """Test an absent certificate is reported as missing"""
        with pytest.raises(InputMissing) as exc_info:
            validator.validate(None, MaterialKind.CERTIFICATE)

        assert exc_info.value.field == "certfile"
        assert exc_info.value.status_code == 400

    def test_empty_upload_is_missing(self, validator):
        """Test a zero-byte key upload is reported as missing"""
        with pytest.raises(InputMissing) as exc_info:
            validator.validate(material(MaterialKind.PRIVATE_KEY, b"", "key.pem"), MaterialKind.PRIVATE_KEY)

        assert exc_info.value.field == "keyfile"
        assert "0 bytes" in exc_info.value.message

    def test_upload_at_limit_accepted(self, validator):
        """Test an upload exactly at the ceiling passes"""
        content = b"x" * validator.limit_for(MaterialKind.CERTIFICATE)
        result = validator.validate(material(MaterialKind.CERTIFICATE, content), MaterialKind.CERTIFICATE)

        assert result.content == content

    @pytest.mark.parametrize("kind", [
        MaterialKind.CERTIFICATE,
        MaterialKind.PRIVATE_KEY,
        MaterialKind.CA_LIST,
        MaterialKind.BUNDLE,
    ])
    def test_upload_one_byte_over_limit(self, validator, kind):
        """Test each kind is rejected one byte past its ceiling"""
        content = b"x" * (validator.limit_for(kind) + 1)

        with pytest.raises(SizeExceeded) as exc_info:
            validator.validate(material(kind, content), kind)

        assert exc_info.value.field == kind.field_name
        assert exc_info.value.status_code == 413

    def test_declared_size_over_limit(self, validator):
        """Test the declared size counts even when only a prefix was read"""
        limit = validator.limit_for(MaterialKind.CERTIFICATE)
        upload = material(MaterialKind.CERTIFICATE, b"x" * 10, declared_size=limit * 4)

        with pytest.raises(SizeExceeded):
            validator.validate(upload, MaterialKind.CERTIFICATE)

    def test_optional_calist_absent(self, validator):
        """Test no CA list, or an unnamed empty one, counts as not supplied"""
        assert validator.validate_optional(None, MaterialKind.CA_LIST) is None
        assert validator.validate_optional(material(MaterialKind.CA_LIST, b"", ""), MaterialKind.CA_LIST) is None

    def test_optional_calist_named_but_empty(self, validator):
        """Test a named but empty CA list is an error"""
        with pytest.raises(InputMissing) as exc_info:
            validator.validate_optional(material(MaterialKind.CA_LIST, b"", "ca.pem"), MaterialKind.CA_LIST)

        assert exc_info.value.field == "calist"

    def test_limits_default_to_settings(self):
        """Test limits come from settings when not given"""
        from config import settings

        validator = InputValidator()

        assert validator.limit_for(MaterialKind.CERTIFICATE) == settings.MAX_CERT_SIZE
        assert validator.limit_for(MaterialKind.PRIVATE_KEY) == settings.MAX_KEY_SIZE
        assert validator.limit_for(MaterialKind.BUNDLE) == settings.MAX_CALIST_SIZE


class TestPassphraseValidation:
    """Test suite for passphrase checks"""

    @pytest.mark.parametrize("raw", [None, ""])
    def test_missing_passphrase(self, validator, raw):
        """Test a missing passphrase is reported against p12pass"""
        with pytest.raises(InputMissing) as exc_info:
            validator.validate_passphrase(raw)

        assert exc_info.value.field == "p12pass"

    def test_passphrase_at_limit(self, validator):
        """Test a 40 character passphrase is accepted"""
        passphrase = validator.validate_passphrase("a" * 40)

        assert isinstance(passphrase, Passphrase)
        assert passphrase.encode() == b"a" * 40

    def test_passphrase_over_limit(self, validator):
        """Test a 41 character passphrase is rejected"""
        with pytest.raises(SizeExceeded) as exc_info:
            validator.validate_passphrase("a" * 41)

        assert exc_info.value.field == "p12pass"

    def test_passphrase_limit_counts_encoded_bytes(self, validator):
        """Test multi-byte characters count by their UTF-8 length"""
        with pytest.raises(SizeExceeded):
            validator.validate_passphrase("é" * 21)

    def test_passphrase_never_rendered(self):
        """Test the passphrase value stays out of str() and repr()"""
        passphrase = Passphrase("test1234")

        assert "test1234" not in str(passphrase)
        assert "test1234" not in repr(passphrase)


class TestValidationBeforeDecode:
    """Size failures must stop the pipeline before any decoding happens"""

    @pytest.fixture
    def decoder(self):
        return Mock(spec=MaterialDecoder)

    @pytest.fixture
    def service(self, validator, decoder, store):
        return P12ConverterService(validator=validator, decoder=decoder, store=store)

    def test_oversize_certificate_never_decoded(self, service, validator, decoder):
        """Test an oversize certificate is rejected with no decoder call"""
        limit = validator.limit_for(MaterialKind.CERTIFICATE)
        context = RequestContext(
            command="create",
            materials={
                MaterialKind.CERTIFICATE: material(MaterialKind.CERTIFICATE, b"x" * (limit + 1), "cert.pem"),
                MaterialKind.PRIVATE_KEY: material(MaterialKind.PRIVATE_KEY, b"key", "key.pem"),
            },
            passphrase="test1234",
        )

        with pytest.raises(SizeExceeded):
            service.execute(context)

        decoder.decode_certificate.assert_not_called()
        decoder.decode_private_key.assert_not_called()
        decoder.decode_ca_list.assert_not_called()

    def test_oversize_calist_stops_before_certificate_decode(self, service, validator, decoder):
        """Test a later oversize field still blocks decoding of earlier ones"""
        limit = validator.limit_for(MaterialKind.CA_LIST)
        context = RequestContext(
            command="create",
            materials={
                MaterialKind.CERTIFICATE: material(MaterialKind.CERTIFICATE, b"cert", "cert.pem"),
                MaterialKind.PRIVATE_KEY: material(MaterialKind.PRIVATE_KEY, b"key", "key.pem"),
                MaterialKind.CA_LIST: material(MaterialKind.CA_LIST, b"x" * (limit + 1), "ca.pem"),
            },
            passphrase="test1234",
        )

        with pytest.raises(SizeExceeded) as exc_info:
            service.execute(context)

        assert exc_info.value.field == "calist"
        decoder.decode_certificate.assert_not_called()

    def test_oversize_bundle_never_decoded(self, service, validator, decoder):
        """Test analyze rejects an oversize bundle without decoding it"""
        limit = validator.limit_for(MaterialKind.BUNDLE)
        context = RequestContext(
            command="analyze",
            materials={MaterialKind.BUNDLE: material(MaterialKind.BUNDLE, b"\x30" * (limit + 1), "big.p12")},
            passphrase="test1234",
        )

        with pytest.raises(SizeExceeded):
            service.execute(context)

        decoder.decode_bundle.assert_not_called()
