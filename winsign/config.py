"""Configuration management with Pydantic and GitHub Actions input support."""

import os
import sys
import tempfile
from pathlib import Path

from pydantic import AliasChoices, Field, PrivateAttr, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMESTAMP_SERVER = "http://timestamp.verisign.com/scripts/timstamp.dll"
DEFAULT_SIGNTOOL_BASE_DIR = Path("C:/Program Files (x86)/Windows Kits/10/bin")
CERTIFICATE_FILENAME = "certificate.pfx"

# Input name -> settings attribute, in the order they are validated.
REQUIRED_INPUTS: dict[str, str] = {
    "folder": "folder",
    "certificate": "certificate",
    "cert-password": "cert_password",
    "cert-sha1": "cert_sha1",
}


def get_xdg_data_home() -> Path:
    """Get XDG_DATA_HOME directory, defaulting to ~/.local/share."""
    xdg_data = os.getenv("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def _input(name: str) -> AliasChoices:
    """Accept ``WINSIGN_<NAME>`` as well as the Actions runner's ``INPUT_<NAME>``."""
    return AliasChoices(f"winsign_{name.replace('-', '_')}", f"input_{name}")


class Settings(BaseSettings):
    """winsign configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    Action inputs keep their hyphenated names (``INPUT_CERT-SHA1``).
    """

    model_config = SettingsConfigDict(
        env_prefix="WINSIGN_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Pipeline inputs
    folder: Path | None = Field(
        default=None,
        validation_alias=_input("folder"),
        description="Root directory containing files to sign",
    )

    recursive: bool = Field(
        default=False,
        validation_alias=_input("recursive"),
        description="Recursively search for supported files",
    )

    certificate: SecretStr | None = Field(
        default=None,
        validation_alias=_input("certificate"),
        description="Base64 encoded PFX certificate",
    )

    cert_password: SecretStr | None = Field(
        default=None,
        validation_alias=_input("cert-password"),
        description="Certificate password",
    )

    cert_sha1: str | None = Field(
        default=None,
        validation_alias=_input("cert-sha1"),
        description="Certificate SHA-1 thumbprint used to select the signing cert",
    )

    cert_description: str | None = Field(
        default=None,
        validation_alias=_input("cert-description"),
        description="Description embedded in the signature (/d)",
    )

    timestamp_server: str = Field(
        default=DEFAULT_TIMESTAMP_SERVER,
        validation_alias=_input("timestamp-server"),
        description="URL of the timestamp server used for signing",
    )

    # Toolchain
    cert_path: Path | None = Field(
        default=None,
        description="Where the decoded PFX is staged (defaults to %TEMP%/certificate.pfx)",
    )

    signtool_base_dir: Path = Field(
        default=DEFAULT_SIGNTOOL_BASE_DIR,
        description="Windows Kits bin directory searched for signtool versions",
    )

    command_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Optional timeout for each external command (seconds)",
    )

    # Retry behaviour
    max_attempts: int = Field(
        default=5,
        ge=1,
        description="Signing attempts per file before giving up",
    )

    backoff_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Linear backoff unit; attempt N waits N * backoff_seconds",
    )

    # Policy switches
    strict_validation: bool = Field(
        default=True,
        description="Abort before staging when a required input is missing",
    )

    verify_failure_is_error: bool = Field(
        default=False,
        description="Treat a failed 'signtool verify' as a failed signing attempt",
    )

    # Audit / logging
    audit_enabled: bool = Field(
        default=False,
        description="Record each run in the append-only audit ledger (opt-in)",
    )

    data_dir: Path | None = Field(
        default=None,
        description="Override data directory (defaults to XDG_DATA_HOME/winsign)",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level for the CLI",
    )

    _resolved_data_dir: Path | None = PrivateAttr(default=None)

    def get_cert_path(self) -> Path:
        """Return the fixed, process-scoped location of the staged certificate."""
        if self.cert_path is not None:
            return self.cert_path
        temp_root = os.getenv("TEMP") or tempfile.gettempdir()
        return Path(temp_root) / CERTIFICATE_FILENAME

    def missing_inputs(self) -> list[str]:
        """Return the names of required inputs that have no value."""
        missing: list[str] = []
        for name, attribute in REQUIRED_INPUTS.items():
            value = getattr(self, attribute)
            if isinstance(value, SecretStr):
                value = value.get_secret_value()
            if value is None or str(value) == "":
                missing.append(name)
        return missing

    def get_certificate(self) -> str:
        """Return the base64 certificate text (empty when unset)."""
        return self.certificate.get_secret_value() if self.certificate else ""

    def get_cert_password(self) -> str:
        """Return the certificate password (empty when unset)."""
        return self.cert_password.get_secret_value() if self.cert_password else ""

    def get_data_dir(self) -> Path:
        """Get the data directory, creating if necessary."""
        if self._resolved_data_dir is not None:
            return self._resolved_data_dir

        if self.data_dir:
            data_dir = self.data_dir
            data_dir.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = data_dir
            return data_dir

        primary_dir = get_xdg_data_home() / "winsign"
        try:
            primary_dir.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = primary_dir
            return primary_dir
        except PermissionError as exc:
            fallback = Path.cwd() / ".winsign-data"
            fallback.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = fallback
            print(
                f"Warning: cannot create data directory at {primary_dir} ({exc}). "
                f"Using local '{fallback}' instead. Pass --data-dir to override.",
                file=sys.stderr,
            )
            return fallback

    def get_audit_path(self) -> Path:
        """Get path to audit ledger file."""
        return self.get_data_dir() / "audit.jsonl"


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
