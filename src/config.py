"""Unified configuration loaded from .pagecraft.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from pagecraft.content.models import Locale

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".pagecraft.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
    Path.home() / ".config" / "pagecraft",
]


class EditorSection(BaseModel):
    """[editor] section."""

    autosave_delay: float = 0.8
    strict_invariants: bool = True
    default_locale: Locale = Locale.MN


class ApiSection(BaseModel):
    """[api] section: the admin REST backend."""

    base_url: str = ""
    token: str = ""
    timeout: float = 10.0

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)


class StoreSection(BaseModel):
    """[store] section: local JSON document store."""

    directory: str = "./content"


class PagecraftConfig(BaseModel):
    """Top-level configuration model."""

    editor: EditorSection = Field(default_factory=EditorSection)
    api: ApiSection = Field(default_factory=ApiSection)
    store: StoreSection = Field(default_factory=StoreSection)


def load_config(path: str | Path | None = None) -> PagecraftConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .pagecraft.toml in CWD
    3. ~/.config/pagecraft/.pagecraft.toml, then ~/.config/pagecraft/config.toml

    Then overlay environment variables.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        global_config = Path.home() / ".config" / "pagecraft" / "config.toml"
        if not data and global_config.exists():
            data = _load_toml(global_config)
            logger.info("Loaded config from %s", global_config)

    config = PagecraftConfig.model_validate(data) if data else PagecraftConfig()
    return _apply_env_vars(config)


def merge_cli_overrides(config: PagecraftConfig, **cli_kwargs: object) -> PagecraftConfig:
    """Overlay explicitly-set CLI flags (non-None values) onto the config."""
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "store_dir": ("store", "directory"),
        "api_url": ("api", "base_url"),
        "api_token": ("api", "token"),
        "locale": ("editor", "default_locale"),
        "autosave_delay": ("editor", "autosave_delay"),
    }

    for key, value in cli_kwargs.items():
        if value is None or key not in mapping:
            continue
        section, field = mapping[key]
        data[section][field] = value

    return PagecraftConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: PagecraftConfig) -> PagecraftConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "PAGECRAFT_API_URL": ("api", "base_url"),
        "PAGECRAFT_API_TOKEN": ("api", "token"),
        "PAGECRAFT_API_TIMEOUT": ("api", "timeout"),
        "PAGECRAFT_STORE_DIR": ("store", "directory"),
        "PAGECRAFT_AUTOSAVE_DELAY": ("editor", "autosave_delay"),
        "PAGECRAFT_LOCALE": ("editor", "default_locale"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    strict_raw = os.environ.get("PAGECRAFT_STRICT")
    if strict_raw is not None:
        data["editor"]["strict_invariants"] = strict_raw.lower() in ("true", "1", "yes")

    return PagecraftConfig.model_validate(data)
