# config.py
# Configuration settings for the application

import os

class Settings:
    """Application settings"""

    # Application
    APP_NAME: str = "PKCS12 Converter API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "OFF").upper() == "ON"

    # Upload limits (bytes)
    MAX_CERT_SIZE: int = int(os.getenv("MAX_CERT_SIZE", str(32 * 1024)))
    MAX_KEY_SIZE: int = int(os.getenv("MAX_KEY_SIZE", str(32 * 1024)))
    MAX_CALIST_SIZE: int = int(os.getenv("MAX_CALIST_SIZE", str(256 * 1024)))
    MAX_PASSPHRASE_LENGTH: int = int(os.getenv("MAX_PASSPHRASE_LENGTH", "40"))

    # Export directory for generated bundles
    EXPORT_DIR: str = os.getenv("EXPORT_DIR", os.path.join(os.getcwd(), "export"))
    EXPORT_URL_PATH: str = os.getenv("EXPORT_URL_PATH", "/export")
    # Empty EXPORT_BASE_URL means the base URL of the incoming request
    EXPORT_BASE_URL: str = os.getenv("EXPORT_BASE_URL", "")
    ARTIFACT_TTL_SECONDS: int = int(os.getenv("ARTIFACT_TTL_SECONDS", "3600"))

    # PKCS12 envelope defaults
    PKCS12_CIPHER: str = os.getenv("PKCS12_CIPHER", "legacy")
    PKCS12_KDF_ITERATIONS: int = int(os.getenv("PKCS12_KDF_ITERATIONS", "2048"))
    PKCS12_MAC_ITERATIONS: int = int(os.getenv("PKCS12_MAC_ITERATIONS", "1"))

    # Logging
    LOG_LEVEL: str = "DEBUG" if DEBUG else "INFO"

    # CORS
    CORS_ORIGINS: list = ["*"]  # In production, specify actual origins

# Global settings instance
settings = Settings()
