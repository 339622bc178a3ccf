"""
Tests for P12ConverterService - create and analyze pipelines end to end
"""

import pytest
import sys
import os

# Add the parent directory to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from certificates.exceptions import CryptoFailure, InputMissing, ParseFailure
from certificates.types import AnalyzeResult, CreateResult, MaterialKind, RequestContext
from services.bundle_introspector import EXTRACTION_ERROR

from conftest import cert_pem, chain_pem, key_pem, make_ca_chain, make_certificate, make_key, material


def create_context(cert, key, chain=None, passphrase="test1234", cert_name="server.pem"):
    materials = {
        MaterialKind.CERTIFICATE: material(MaterialKind.CERTIFICATE, cert_pem(cert), cert_name),
        MaterialKind.PRIVATE_KEY: material(MaterialKind.PRIVATE_KEY, key_pem(key), "server.key"),
    }
    if chain is not None:
        materials[MaterialKind.CA_LIST] = material(MaterialKind.CA_LIST, chain_pem(chain), "ca.pem")
    return RequestContext(
        command="create",
        materials=materials,
        passphrase=passphrase,
        base_url="http://testserver",
    )


def analyze_context(p12_bytes, passphrase="test1234"):
    return RequestContext(
        command="analyze",
        materials={MaterialKind.BUNDLE: material(MaterialKind.BUNDLE, p12_bytes, "server.p12")},
        passphrase=passphrase,
    )


class TestCreate:
    """Test suite for the create command"""

    @pytest.fixture
    def test_key(self):
        return make_key()

    @pytest.fixture
    def test_cert(self, test_key):
        """Self-signed certificate with subject CN test1234"""
        return make_certificate("test1234", test_key)

    def test_create_self_signed(self, converter, store, test_cert, test_key):
        """Test a self-signed pair without CA list becomes a downloadable bundle"""
        result = converter.execute(create_context(test_cert, test_key))

        assert isinstance(result, CreateResult)
        assert result.artifact.url == f"http://certs.example.test/export/tmp/{result.artifact.filename}"
        assert result.summary["certificate"]["subject"] == test_cert.subject.rfc4514_string()
        assert result.summary["ca_count"] == 0
        assert store.count_artifacts() == 1

    def test_create_then_analyze_preserves_names(self, converter, store, test_cert, test_key):
        """Test analyzing a created bundle reports the original subject and issuer"""
        created = converter.execute(create_context(test_cert, test_key))
        _, p12_bytes = store.read(created.artifact.filename)

        result = converter.execute(analyze_context(p12_bytes))

        assert isinstance(result, AnalyzeResult)
        certificate = result.summary["certificate"]
        assert certificate["subject_fields"]["common_name"] == "test1234"
        assert certificate["issuer_fields"]["common_name"] == "test1234"
        assert certificate["is_self_signed"] is True
        assert result.summary["private_key"]["algorithm"] == "EC"
        assert result.size == len(p12_bytes)

    @pytest.mark.parametrize("count", [1, 2, 5])
    def test_create_with_ca_list(self, converter, store, test_cert, test_key, count):
        """Test every supplied CA certificate ends up in the bundle"""
        chain = make_ca_chain(count)

        created = converter.execute(create_context(test_cert, test_key, chain))
        result = converter.execute(analyze_context(store.read(created.artifact.filename)[1]))

        assert result.summary["ca_count"] == count
        assert sorted(ca["subject"] for ca in result.summary["ca_chain"]) == \
            sorted(ca.subject.rfc4514_string() for ca in chain)

    def test_friendly_name_from_certificate_filename(self, converter, test_cert, test_key):
        """Test the bundle is labelled with the uploaded certificate name"""
        result = converter.execute(create_context(test_cert, test_key, cert_name="www.example.com.crt"))

        assert result.summary["friendly_name"] == "www.example.com.crt"

    def test_mismatched_key_leaves_no_artifact(self, converter, store, test_cert):
        """Test a failed assembly never stages a file"""
        with pytest.raises(CryptoFailure):
            converter.execute(create_context(test_cert, make_key()))

        assert store.count_artifacts() == 0

    def test_bad_calist_stops_before_assembly(self, converter, store, test_cert, test_key):
        """Test a CA list without certificates is a ParseFailure"""
        context = create_context(test_cert, test_key)
        materials = dict(context.materials)
        materials[MaterialKind.CA_LIST] = material(MaterialKind.CA_LIST, b"garbage", "ca.pem")
        context = RequestContext(command="create", materials=materials, passphrase="test1234")

        with pytest.raises(ParseFailure) as exc_info:
            converter.execute(context)

        assert exc_info.value.field == "calist"
        assert store.count_artifacts() == 0

    def test_missing_passphrase(self, converter, test_cert, test_key):
        """Test create requires a passphrase"""
        with pytest.raises(InputMissing) as exc_info:
            converter.execute(create_context(test_cert, test_key, passphrase=None))

        assert exc_info.value.field == "p12pass"

    def test_missing_keyfile(self, converter, test_cert):
        """Test create requires a key"""
        context = RequestContext(
            command="create",
            materials={MaterialKind.CERTIFICATE: material(MaterialKind.CERTIFICATE, cert_pem(test_cert), "c.pem")},
            passphrase="test1234",
        )

        with pytest.raises(InputMissing) as exc_info:
            converter.execute(context)

        assert exc_info.value.field == "keyfile"


class TestAnalyze:
    """Test suite for the analyze command"""

    @pytest.fixture
    def p12_bytes(self, converter, store, leaf_cert, leaf_key):
        created = converter.execute(create_context(leaf_cert, leaf_key, make_ca_chain(2)))
        return store.read(created.artifact.filename)[1]

    def test_analyze_reports_contents(self, converter, p12_bytes, leaf_cert):
        """Test analyze summarizes certificate, key and chain"""
        result = converter.execute(analyze_context(p12_bytes))

        assert result.filename == "server.p12"
        assert result.summary["certificate"]["serial_number"] == str(leaf_cert.serial_number)
        assert result.summary["private_key"]["ec_curve"] == "secp256r1"
        assert [ca["chain_position"] for ca in result.summary["ca_chain"]] == [1, 2]

    def test_summary_has_no_private_material(self, converter, p12_bytes):
        """Test the key summary only carries public properties"""
        result = converter.execute(analyze_context(p12_bytes))

        assert set(result.summary["private_key"]) == {"algorithm", "key_size", "public_key_fingerprint", "ec_curve"}

    def test_wrong_passphrase(self, converter, p12_bytes):
        """Test a wrong passphrase gives the generic extraction error"""
        with pytest.raises(CryptoFailure) as exc_info:
            converter.execute(analyze_context(p12_bytes, passphrase="not-the-passphrase"))

        assert exc_info.value.message == EXTRACTION_ERROR

    def test_truncated_bundle(self, converter, p12_bytes):
        """Test a truncated upload fails structure decoding"""
        with pytest.raises(ParseFailure):
            converter.execute(analyze_context(p12_bytes[:100]))

    def test_missing_bundle(self, converter):
        """Test analyze requires a p12file"""
        with pytest.raises(InputMissing) as exc_info:
            converter.execute(RequestContext(command="analyze", passphrase="test1234"))

        assert exc_info.value.field == "p12file"


class TestCommandDispatch:
    """Test suite for command selection"""

    @pytest.mark.parametrize("command", ["", "convert", "CREATE"])
    def test_unknown_command(self, converter, command):
        """Test anything but create or analyze is refused"""
        with pytest.raises(InputMissing) as exc_info:
            converter.execute(RequestContext(command=command))

        assert exc_info.value.field == "cmd"

    def test_create_purges_expired_artifacts(self, converter, store, clock, leaf_cert, leaf_key):
        """Test each invocation sweeps artifacts past their TTL"""
        old = converter.execute(create_context(leaf_cert, leaf_key)).artifact
        clock.advance(store.ttl_seconds + 1)

        converter.execute(create_context(leaf_cert, leaf_key))

        assert not os.path.exists(old.path)
        assert store.count_artifacts() == 1
