"""Configuration helpers for the storefront engine and its HTTP shell.

Installers and tests prime the expected values through a ``.env`` file or an
explicit mapping instead of touching module internals.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Optional
import logging
import os

from dotenv import load_dotenv

from .currency import BASE_CURRENCY, SUPPORTED_CURRENCIES
from .storage import is_valid_key
from .stores import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES


@dataclass(frozen=True)
class StorefrontConfig:
    """Strongly typed configuration for the storefront."""

    base_dir: Path
    data_dir: Path
    key_prefix: str
    store_secret: str
    catalog_file: Optional[Path]
    default_currency: str
    default_language: str
    host: str
    port: int
    force_tls: bool
    allowed_origins: tuple[str, ...]
    secret_key: str
    log_level: int

    @property
    def encrypt_store(self) -> bool:
        return bool(self.store_secret)


def env_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _coerce_origins(raw: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(raw, str):
        items = [piece.strip() for piece in raw.split(",")]
    else:
        items = [piece.strip() for piece in raw]
    return tuple(filter(None, items)) or (
        "http://localhost",
        "http://127.0.0.1",
    )


def _choice(value: str, allowed: tuple[str, ...], fallback: str) -> str:
    return value if value in allowed else fallback


def _log_level(raw: str) -> int:
    level = logging.getLevelName(raw.strip().upper() or "INFO")
    return level if isinstance(level, int) else logging.INFO


def load_storefront_config(base_dir: Path, env: Mapping[str, str] | None = None) -> StorefrontConfig:
    """Load storefront configuration from the given base directory and env mapping."""

    base_dir = Path(base_dir)
    load_dotenv(base_dir / ".env")
    env_map = dict(env if env is not None else os.environ)

    data_dir = Path(env_map.get("STOREFRONT_DATA_DIR", "") or base_dir / "data")
    if not data_dir.is_absolute():
        data_dir = base_dir / data_dir
    catalog_raw = env_map.get("STOREFRONT_CATALOG_FILE", "").strip()
    catalog_file = Path(catalog_raw) if catalog_raw else None
    if catalog_file is not None and not catalog_file.is_absolute():
        catalog_file = base_dir / catalog_file
    key_prefix = env_map.get("STOREFRONT_KEY_PREFIX", "jg_")
    if not is_valid_key(f"{key_prefix}cart_v1"):
        raise ValueError(f"Invalid STOREFRONT_KEY_PREFIX {key_prefix!r}; use letters, digits, _ . -")

    return StorefrontConfig(
        base_dir=base_dir,
        data_dir=data_dir,
        key_prefix=key_prefix,
        store_secret=env_map.get("STOREFRONT_STORE_SECRET", "").strip(),
        catalog_file=catalog_file,
        default_currency=_choice(
            env_map.get("STOREFRONT_DEFAULT_CURRENCY", BASE_CURRENCY).upper(),
            SUPPORTED_CURRENCIES,
            BASE_CURRENCY,
        ),
        default_language=_choice(
            env_map.get("STOREFRONT_DEFAULT_LANGUAGE", DEFAULT_LANGUAGE).lower(),
            SUPPORTED_LANGUAGES,
            DEFAULT_LANGUAGE,
        ),
        host=env_map.get("STOREFRONT_HOST", "127.0.0.1"),
        port=int(env_map.get("STOREFRONT_PORT", "7890")),
        force_tls=env_bool(env_map.get("FORCE_TLS"), False),
        allowed_origins=_coerce_origins(env_map.get("ALLOWED_ORIGINS", "")),
        secret_key=env_map.get("SECRET_KEY", "dev-change-me"),
        log_level=_log_level(env_map.get("LOG_LEVEL", "INFO")),
    )
