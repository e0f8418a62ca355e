"""
Client configuration loader (backend, credentials, image providers).

Values come from config/client_config.yml and are overridden by environment
variables (a local .env file is honoured via python-dotenv).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from mconnect.credentials.resolver import DEFAULT_TOKEN_KEYS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "client_config.yml"


class BackendConfig(BaseModel):
    base_url: str = "http://localhost:8000/api"
    timeout_seconds: float = Field(default=30.0, gt=0, le=300)


class CredentialsConfig(BaseModel):
    token_keys: List[str] = Field(default_factory=lambda: list(DEFAULT_TOKEN_KEYS), min_length=1)
    resolve_timeout_seconds: float = Field(default=2.0, gt=0, le=30)
    redis_url: Optional[str] = None
    dev_token: Optional[str] = None              # served last in the chain, mock mode only


class ImagesConfig(BaseModel):
    provider: Literal["auto", "pexels", "unsplash", "chain", "mock", "none"] = "auto"
    remote_timeout_seconds: float = Field(default=8.0, gt=0, le=120)
    orientation: Literal["landscape", "portrait", "square"] = "landscape"
    size: Literal["small", "medium", "large"] = "medium"
    request_delay_seconds: float = Field(default=0.0, ge=0, le=5)
    pexels_api_key: Optional[str] = None
    unsplash_access_key: Optional[str] = None
    fallback_seed: Optional[int] = None          # pins random fallback picks when set


class ClientConfig(BaseModel):
    integrations_mode: Literal["auto", "real", "mock"] = "auto"
    backend: BackendConfig = Field(default_factory=BackendConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    images: ImagesConfig = Field(default_factory=ImagesConfig)


_MODE_ALIASES = {"real": "real", "live": "real", "mock": "mock", "test": "mock", "auto": "auto"}


def _apply_env_overrides(data: Dict[str, Any], env: Mapping[str, str]) -> Dict[str, Any]:
    backend = data.setdefault("backend", {})
    credentials = data.setdefault("credentials", {})
    images = data.setdefault("images", {})

    if env.get("MCONNECT_API_BASE_URL"):
        backend["base_url"] = env["MCONNECT_API_BASE_URL"]
    if env.get("MCONNECT_API_TIMEOUT"):
        backend["timeout_seconds"] = env["MCONNECT_API_TIMEOUT"]

    mode = env.get("INTEGRATIONS_MODE", "").strip().lower()
    if mode:
        if mode not in _MODE_ALIASES:
            logger.warning("Ignoring unknown INTEGRATIONS_MODE=%r", mode)
        else:
            data["integrations_mode"] = _MODE_ALIASES[mode]

    if env.get("REDIS_URL"):
        credentials["redis_url"] = env["REDIS_URL"]
    if env.get("MCONNECT_DEV_TOKEN"):
        credentials["dev_token"] = env["MCONNECT_DEV_TOKEN"]

    if env.get("MCONNECT_IMAGE_PROVIDER"):
        images["provider"] = env["MCONNECT_IMAGE_PROVIDER"].strip().lower()
    if env.get("PEXELS_API_KEY"):
        images["pexels_api_key"] = env["PEXELS_API_KEY"]
    if env.get("UNSPLASH_ACCESS_KEY"):
        images["unsplash_access_key"] = env["UNSPLASH_ACCESS_KEY"]
    return data


def load_client_config(config_path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """
    Load and validate client configuration.

    Args:
        config_path: YAML file to read. Defaults to config/client_config.yml;
            a missing default file means built-in defaults.
        env: Environment to read overrides from. Defaults to os.environ after
            loading .env.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValidationError: If the merged config doesn't match the schema
    """
    if env is None:
        load_dotenv()
        env = os.environ

    data: Dict[str, Any] = {}
    path = config_path or DEFAULT_CONFIG_PATH
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    elif config_path is not None:
        raise FileNotFoundError(f"Client config file not found: {config_path}")
    else:
        logger.info("No client config at %s; using defaults", path)

    data = _apply_env_overrides(data, env)

    try:
        cfg = ClientConfig(**data)
        logger.info("Loaded client config (mode=%s, backend=%s)", cfg.integrations_mode, cfg.backend.base_url)
        return cfg
    except ValidationError as e:
        logger.error("Client config validation failed: %s", e)
        raise
