# utils/logging_utils.py
# Logging setup with redaction of key material and passphrases

import logging
import re

PRIVATE_KEY_PATTERN = re.compile(
    r"-----BEGIN[^-]*PRIVATE KEY-----.*?-----END[^-]*PRIVATE KEY-----", re.DOTALL
)
PASSPHRASE_PATTERN = re.compile(r"""(["']?(?:p12pass|passphrase|password)["']?\s*[:=]\s*)(["'])?[^\s,'"}]+(["'])?""", re.IGNORECASE)

class SensitiveDataFilter(logging.Filter):
    """Redact private keys and passphrase fields from log messages"""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            msg = record.getMessage()
            redacted = PRIVATE_KEY_PATTERN.sub("[PRIVATE KEY REDACTED]", msg)
            redacted = PASSPHRASE_PATTERN.sub(r"\1[REDACTED]", redacted)
            if redacted != msg:
                record.msg = redacted
                record.args = None
        return True

def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Apply filter to all root handlers
    for handler in logging.root.handlers:
        handler.addFilter(SensitiveDataFilter())
    logging.getLogger("multipart").setLevel(logging.WARNING)
