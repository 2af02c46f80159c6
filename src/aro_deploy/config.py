"""Runtime configuration read from environment variables.

Settings are loaded with pydantic-settings.  Variable names carry no
prefix (``LOCATION``, ``RESOURCEGROUP``, ``CLUSTER`` …) and may also be
placed in a ``.env`` file in the working directory.  An empty variable
behaves as if it were unset.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from aro_deploy.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Cluster parameters and tool tunables."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    location: str = Field(default="southeastasia", min_length=1)
    resourcegroup: str = Field(default="aro-rg", min_length=1)
    cluster: str = Field(default="cluster", min_length=1)
    cluster_version: str = Field(default="4.19.20", min_length=1)
    pull_secret_file: Path = Field(default=Path("pull-secret.txt"))

    master_vm_size: str = Field(default="Standard_D8as_v5", min_length=1)
    worker_vm_size: str = Field(default="Standard_D8as_v5", min_length=1)

    identity_propagation_seconds: float = Field(
        default=30.0,
        ge=0,
        description="Pause after creating identities, before role assignment.",
    )
    aro_extension_url: str = Field(
        default="https://aka.ms/az-aroext-latest",
        min_length=8,
        description="Redirecting URL of the latest ARO preview extension wheel.",
    )
    http_timeout_seconds: float = Field(default=60.0, gt=0)


# Variables shown in the usage text, in display order.
USAGE_VARIABLES: tuple[tuple[str, str], ...] = (
    ("LOCATION", "location"),
    ("RESOURCEGROUP", "resourcegroup"),
    ("CLUSTER", "cluster"),
    ("CLUSTER_VERSION", "cluster_version"),
    ("PULL_SECRET_FILE", "pull_secret_file"),
)


def load_settings(**overrides: object) -> Settings:
    """Build :class:`Settings`, mapping validation failures to our hierarchy."""
    try:
        return Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        fields = ", ".join(
            str(err["loc"][0]).upper() for err in exc.errors() if err.get("loc")
        )
        raise ConfigurationError(
            f"Invalid configuration: {fields or exc}",
            hint="Check the environment variables (or .env file) listed above.",
        ) from exc
