# services/p12_converter.py
"""
PKCS#12 Converter Service

Sequences the conversion pipeline for the two converter commands:

- create:  validate -> decode PEM material -> assemble bundle -> stage artifact
- analyze: validate -> decode PKCS12 file -> open bundle -> summarize

Each step raises a P12ConverterError subclass on failure. The first failure
ends the invocation and reaches the caller unchanged; nothing is retried.
"""

import logging
from typing import Optional, Union

from certificates.analyzer import summarize_bundle_contents
from certificates.exceptions import InputMissing
from certificates.formats import MaterialDecoder
from certificates.types import (
    AnalyzeResult, Command, CreateResult, MaterialKind, RequestContext
)
from certificates.validation import InputValidator
from services.artifact_store import ArtifactStore, artifact_store
from services.bundle_assembler import BundleAssembler, bundle_assembler
from services.bundle_introspector import BundleIntrospector, bundle_introspector
from services.debug_utils import log_function_call

logger = logging.getLogger(__name__)


class P12ConverterService:
    """Orchestrates validation, decoding, bundle handling and artifact staging"""

    def __init__(
        self,
        validator: Optional[InputValidator] = None,
        decoder: Optional[MaterialDecoder] = None,
        assembler: Optional[BundleAssembler] = None,
        introspector: Optional[BundleIntrospector] = None,
        store: Optional[ArtifactStore] = None,
    ):
        self.validator = validator or InputValidator()
        self.decoder = decoder or MaterialDecoder()
        self.assembler = assembler or bundle_assembler
        self.introspector = introspector or bundle_introspector
        self.store = store or artifact_store

    def execute(self, context: RequestContext) -> Union[CreateResult, AnalyzeResult]:
        """Dispatch on the context command"""
        try:
            command = Command(context.command)
        except ValueError:
            raise InputMissing("cmd", "Error URL >cmd< parameter is not [create|analyze]")

        if command == Command.CREATE:
            return self.create(context)
        return self.analyze(context)

    @log_function_call()
    def create(self, context: RequestContext) -> CreateResult:
        """Build a bundle from certificate, key and CA list, and stage it for download"""
        logger.info("=== PKCS12 CREATE ===")
        self.store.purge_expired()

        # All inputs are checked before anything is decoded
        cert_material = self.validator.validate(context.material(MaterialKind.CERTIFICATE), MaterialKind.CERTIFICATE)
        key_material = self.validator.validate(context.material(MaterialKind.PRIVATE_KEY), MaterialKind.PRIVATE_KEY)
        ca_material = self.validator.validate_optional(context.material(MaterialKind.CA_LIST), MaterialKind.CA_LIST)
        passphrase = self.validator.validate_passphrase(context.passphrase)

        certificate = self.decoder.decode_certificate(cert_material)
        private_key = self.decoder.decode_private_key(key_material)
        chain = self.decoder.decode_ca_list(ca_material)
        logger.debug(f"Decoded create inputs: CA chain of {len(chain)}")

        options = self.assembler.default_options.with_friendly_name(cert_material.filename)
        bundle = self.assembler.assemble(certificate, private_key, chain, passphrase, options)

        # Summarize what the new bundle actually holds before it is published
        summary = summarize_bundle_contents(self.introspector.open(bundle, passphrase))
        artifact = self.store.store(bundle, request_base_url=context.base_url)
        logger.info(f"PKCS12 bundle {artifact.filename} ready for download")
        return CreateResult(artifact=artifact, summary=summary)

    @log_function_call()
    def analyze(self, context: RequestContext) -> AnalyzeResult:
        """Open an uploaded bundle and summarize what is inside"""
        logger.info("=== PKCS12 ANALYZE ===")
        self.store.purge_expired()

        p12_material = self.validator.validate(context.material(MaterialKind.BUNDLE), MaterialKind.BUNDLE)
        passphrase = self.validator.validate_passphrase(context.passphrase)

        bundle = self.decoder.decode_bundle(p12_material)
        contents = self.introspector.open(bundle, passphrase)

        return AnalyzeResult(
            filename=p12_material.filename,
            size=p12_material.size,
            summary=summarize_bundle_contents(contents),
        )


# Global instance
p12_converter_service = P12ConverterService()
