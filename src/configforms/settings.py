"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
import ssl
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from configforms.exceptions import SettingsError

logger = logging.getLogger(__name__)

_LOCAL_HOSTS = {"localhost", "127.0.0.1", "::1"}


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "configforms"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    rpc_url: str = Field(
        default="http://localhost/rpc/v1",
        validation_alias="RPC_URL",
        description="JSON-RPC endpoint of the device receiving submitted configurations.",
    )
    https_proxy: str | None = Field(
        default=None,
        validation_alias="HTTPS_PROXY",
        description="HTTPS proxy URL.",
    )
    cert_path: str | None = Field(
        default=None,
        validation_alias="CERT_PATH",
        description="Path to SSL certificate.",
    )
    timeout: float = Field(
        default=30.0,
        validation_alias="TIMEOUT",
        description="Request timeout in seconds.",
    )

    spec_dir: str = Field(
        default="specs",
        validation_alias="SPEC_DIR",
        description="Directory holding package spec documents.",
    )

    @field_validator("rpc_url")
    @classmethod
    def _validate_rpc_url(cls, value: str) -> str:
        """Ensure the RPC URL is an http(s) URL with a host.

        Args:
            value (str): Raw URL.

        Raises:
            ValueError: If the scheme or host is unusable.

        Returns:
            str: Stripped URL.
        """
        url = value.strip()
        parsed = urlparse(url)
        if parsed.scheme not in {"http", "https"}:
            raise ValueError("RPC_URL must use http or https")
        if not parsed.hostname:
            raise ValueError("RPC_URL must include a hostname")
        return url

    @property
    def rpc_is_local(self) -> bool:
        """Return whether the RPC endpoint is on the local host."""
        return (urlparse(self.rpc_url).hostname or "") in _LOCAL_HOSTS


def build_ssl_context(settings: Settings) -> ssl.SSLContext:
    """Build a strict SSL context from settings.

    Without a ``CERT_PATH`` the host trust store is used, falling back to the
    certifi bundle when the host store holds no CA certificate.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        ssl.SSLContext: Configured TLS context.
    """
    ssl_context = ssl.create_default_context(cafile=settings.cert_path)
    if settings.cert_path is None and not _cert_store_has_ca(ssl_context):
        ssl_context = ssl.create_default_context(cafile=_get_certifi_cafile())
    ssl_context.verify_mode = ssl.CERT_REQUIRED
    ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2
    return ssl_context


def _cert_store_has_ca(ssl_context: ssl.SSLContext) -> bool:
    return ssl_context.cert_store_stats().get("x509_ca", 0) > 0


def _get_certifi_cafile() -> str:
    import certifi  # noqa: PLC0415

    return certifi.where()


def build_httpx_client_kwargs(settings: Settings) -> dict[str, Any]:
    """Build kwargs used for `httpx.AsyncClient`.

    Local endpoints never go through the proxy.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        dict[str, Any]: Arguments for client constructors.
    """
    kwargs: dict[str, Any] = {
        "verify": build_ssl_context(settings),
        "timeout": settings.timeout,
    }
    if settings.https_proxy and not settings.rpc_is_local:
        kwargs["proxy"] = settings.https_proxy
    return kwargs


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            ensure_env_file_exists()
            try:
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values.

    Args:
        exc (Exception): Caught settings initialization error.

    Returns:
        bool: True when the error represents missing settings values.
    """
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
