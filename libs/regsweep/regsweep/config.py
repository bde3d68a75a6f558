"""Configuration management using pydantic-settings."""

from pydantic import Field
from pydantic.aliases import AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict

from regsweep.exceptions import ConfigurationError

_ENV_FILES = (".env", "../.env", "../../.env")

STORAGE_BACKENDS = ("s3", "local")


class RegistryConfig(BaseSettings):
    """Where the registry lives inside the bucket."""

    model_config = SettingsConfigDict(
        env_prefix="REGISTRY_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bucket: str = ""
    root: str = "docker/registry/v2"


class S3Config(BaseSettings):
    """S3/MinIO client configuration."""

    model_config = SettingsConfigDict(
        env_prefix="S3_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # None means the AWS default endpoint for `region`.
    endpoint: str | None = None
    region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("S3_REGION", "AWS_DEFAULT_REGION"),
    )
    # Empty credentials fall back to the boto3 credential chain.
    access_key: str | None = None
    secret_key: str | None = None

    page_size: int = Field(default=1000, ge=1, le=1000)
    connect_timeout: float = Field(default=10.0, gt=0)
    read_timeout: float = Field(default=60.0, gt=0)
    max_attempts: int = Field(
        default=5,
        ge=1,
        description="botocore retry budget per call (listing pages and body fetches).",
    )


class ReconcileConfig(BaseSettings):
    """Reconciliation tuning."""

    model_config = SettingsConfigDict(
        env_prefix="RECONCILE_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    link_fetch_concurrency: int = Field(
        default=8,
        ge=1,
        description="Max link bodies fetched in parallel during the reference pass.",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    file: str | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    storage_backend: str = "s3"  # "s3" | "local"
    # Filesystem driver root; the bucket name is a directory beneath it.
    local_dir: str = "./data"

    registry: RegistryConfig = RegistryConfig()
    s3: S3Config = S3Config()
    reconcile: ReconcileConfig = ReconcileConfig()

    # Logging
    logging: LoggingSettings = LoggingSettings()

    @property
    def backend(self) -> str:
        return str(self.storage_backend or "s3").strip().lower()

    def validate_for_run(self) -> None:
        """Reject settings that cannot drive a reconciliation run."""
        if self.backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend: {self.storage_backend!r} (expected: s3/local)"
            )
        if self.backend == "s3" and not str(self.registry.bucket or "").strip():
            raise ConfigurationError("REGISTRY_BUCKET is required for the s3 backend")
        endpoint = str(self.s3.endpoint or "").strip()
        if self.backend == "s3" and endpoint and not endpoint.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"S3_ENDPOINT must be an http(s) URL, got {self.s3.endpoint!r}"
            )
