"""
Connection configuration for factomd and factom-walletd.

Both snake_case field names and the camelCase keys used by node
configuration files (``debugPath``, ``rejectUnauthorized``, ``minTimeout``...)
are accepted.
"""

from __future__ import annotations
from typing import Optional, Any, Dict, Union

from pydantic import BaseModel, Field, field_validator

FACTOMD_DEFAULT_PORT = 8088
WALLETD_DEFAULT_PORT = 8089


class RetryOptions(BaseModel):
    """
    Retry strategy of failed HTTP calls.

    Delays are in seconds: ``min_timeout * factor^n`` capped at ``max_timeout``.
    """

    retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    factor: float = Field(default=2.0, gt=0)
    min_timeout: float = Field(default=0.5, ge=0, alias="minTimeout")
    max_timeout: float = Field(default=2.0, ge=0, alias="maxTimeout")

    model_config = {"populate_by_name": True}

    @property
    def max_attempts(self) -> int:
        return self.retries + 1


class ConnectionOptions(BaseModel):
    """
    Options of connection to factomd or factom-walletd.

    ``port`` left unset resolves to 8088 for factomd and 8089 for walletd;
    ``timeout`` is the per-request timeout in seconds (None for no timeout).
    """

    host: str = "localhost"
    port: Optional[int] = Field(default=None, gt=0, lt=65536)
    path: str = "/v2"
    debug_path: str = Field(default="/debug", alias="debugPath")
    user: Optional[str] = None
    password: Optional[str] = None
    protocol: str = "http"
    timeout: Optional[float] = Field(default=None, ge=0)
    reject_unauthorized: bool = Field(default=True, alias="rejectUnauthorized")
    retry: RetryOptions = Field(default_factory=RetryOptions)

    model_config = {"populate_by_name": True}

    @field_validator("protocol")
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        if v not in ("http", "https"):
            raise ValueError(f"protocol must be 'http' or 'https', got {v!r}")
        return v

    @field_validator("path", "debug_path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        return v if v.startswith("/") else "/" + v

    def base_url(self, default_port: int) -> str:
        """Scheme, host and port of the node, without path."""
        return f"{self.protocol}://{self.host}:{self.port or default_port}"

    @property
    def has_auth(self) -> bool:
        return bool(self.user)


def to_connection_options(conf: Union[None, ConnectionOptions, Dict[str, Any]]) -> ConnectionOptions:
    """Accept options as a model, a plain dictionary or None for defaults."""
    if conf is None:
        return ConnectionOptions()
    if isinstance(conf, ConnectionOptions):
        return conf
    return ConnectionOptions.model_validate(conf)


__all__ = [
    "RetryOptions",
    "ConnectionOptions",
    "to_connection_options",
    "FACTOMD_DEFAULT_PORT",
    "WALLETD_DEFAULT_PORT",
]
