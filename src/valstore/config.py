"""Configuration management for valstore.

Loads account credentials from .env and endpoints/shards from shards.yaml.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from dotenv import load_dotenv


class AuthEndpoints(BaseModel):
    """Riot auth endpoints used by the handshake."""
    authorization: str = "https://auth.riotgames.com/api/v1/authorization"
    entitlements: str = "https://entitlements.auth.riotgames.com/api/token/v1"
    userinfo: str = "https://auth.riotgames.com/userinfo"


class ShardProfile(BaseModel):
    """A single shard's storefront configuration."""
    storefront_endpoint: str


class Settings(BaseModel):
    """Application settings loaded from environment variables."""
    username: str = Field(default="", description="Riot account username")
    password: str = Field(default="", description="Riot account password")
    shard: str = Field(default="na", description="Account shard (na, eu, ap, kr)")
    language: str = Field(default="en_US", description="Language sent with the credential submission")
    catalog_path: str = Field(default="./data/catalog.json", description="Catalog snapshot file")
    timeout: float = Field(default=30.0, description="Per-request timeout in seconds")


class Config(BaseModel):
    """Full application configuration."""
    settings: Settings
    auth: AuthEndpoints = Field(default_factory=AuthEndpoints)
    shards: dict[str, ShardProfile]

    def get_shard(self, shard: str | None = None) -> ShardProfile:
        """Get shard profile by code (e.g. na, eu). Defaults to the configured shard."""
        shard = (shard or self.settings.shard).lower()
        if shard not in self.shards:
            available = ", ".join(sorted(self.shards.keys()))
            raise ValueError(f"Unknown shard '{shard}'. Available: {available}")
        return self.shards[shard]

    @property
    def all_shards(self) -> list[str]:
        """List all configured shard codes."""
        return sorted(self.shards.keys())


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (where config/ lives)."""
    current = Path(__file__).resolve().parent
    for parent in [current, *current.parents]:
        if (parent / "config" / "shards.yaml").exists():
            return parent
    # Fallback: cwd
    return Path.cwd()


def _load_shards(project_root: Path) -> tuple[AuthEndpoints, dict[str, ShardProfile]]:
    """Load auth endpoints and shard profiles from shards.yaml."""
    shards_path = project_root / "config" / "shards.yaml"
    if not shards_path.exists():
        raise FileNotFoundError(f"Shards config not found at {shards_path}")

    with open(shards_path) as f:
        data = yaml.safe_load(f) or {}

    endpoints = AuthEndpoints(**data.get("auth", {}))
    shards = {}
    for code, shard_data in data.get("shards", {}).items():
        shards[code.lower()] = ShardProfile(**shard_data)
    return endpoints, shards


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _load_settings() -> Settings:
    """Load settings from environment variables.

    Supports both VALSTORE_* and the legacy __riot_* names from .env.
    """
    return Settings(
        username=_env("VALSTORE_USERNAME", "__riot_username"),
        password=_env("VALSTORE_PASSWORD", "__riot_password"),
        shard=_env("VALSTORE_SHARD", default="na").lower(),
        language=_env("VALSTORE_LANGUAGE", default="en_US"),
        catalog_path=_env("VALSTORE_CATALOG_PATH", default="./data/catalog.json"),
        timeout=float(_env("VALSTORE_TIMEOUT", default="30")),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full application configuration."""
    project_root = _find_project_root()

    # Load .env from project root if it exists
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    settings = _load_settings()
    endpoints, shards = _load_shards(project_root)

    return Config(settings=settings, auth=endpoints, shards=shards)
