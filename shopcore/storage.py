"""Device-local key-value persistence for the storefront.

Every logical key (cart, wishlist, compare, currency, language) lives in its
own JSON file under a single data directory. Writes go through a temporary
file and ``os.replace`` so a reader never observes a half-written payload,
and reads never raise: a missing, unreadable or malformed payload yields the
caller's default and stays on disk until the next write replaces it.
"""
from __future__ import annotations

import base64
import copy
import hashlib
import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Callable, Iterator

from cryptography.fernet import Fernet, InvalidToken

from .exceptions import StoreError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def is_valid_key(key: str) -> bool:
    return bool(_KEY_PATTERN.fullmatch(key or ""))


class DecodeFailure(ValueError):
    """Internal signal for a payload that cannot be turned into a value."""


class KeyValueStore:
    """JSON-encoded values keyed by logical name, one file per key."""

    suffix = ".json"

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------
    def _path_for(self, key: str) -> Path:
        if not is_valid_key(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.root / f"{key}{self.suffix}"

    def _encode(self, value: Any) -> bytes:
        return json.dumps(value, ensure_ascii=False).encode("utf-8")

    def _decode(self, blob: bytes) -> Any:
        try:
            return json.loads(blob.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as exc:
            raise DecodeFailure(str(exc)) from exc

    def _write_bytes(self, path: Path, payload: bytes) -> None:
        # Unique temp name per write; concurrent writers never share one.
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{path.name}.", suffix=".tmp")
        except OSError as exc:  # pragma: no cover - bubbled up to callers
            raise StoreError(str(exc)) from exc
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, path)
        except OSError as exc:  # pragma: no cover - bubbled up to callers
            raise StoreError(str(exc)) from exc
        finally:
            tmp_path.unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def read(
        self,
        key: str,
        default: Any,
        validate: Callable[[Any], Any] | None = None,
    ) -> Any:
        """Return the value stored under ``key`` or a copy of ``default``.

        ``validate`` receives the decoded JSON and returns the typed value;
        any ``ValueError``/``TypeError`` it raises (pydantic's
        ``ValidationError`` included) counts as a decode failure.
        """

        try:
            path = self._path_for(key)
        except ValueError:
            return copy.deepcopy(default)
        if not path.exists():
            return copy.deepcopy(default)
        try:
            blob = path.read_bytes()
            value = self._decode(blob)
            if validate is not None:
                value = validate(value)
        except OSError as exc:
            logger.warning("Unable to read %s, using default: %s", key, exc)
            return copy.deepcopy(default)
        except (ValueError, TypeError) as exc:
            logger.warning("Discarding unreadable payload for %s: %s", key, exc)
            return copy.deepcopy(default)
        return value

    def write(self, key: str, value: Any) -> None:
        path = self._path_for(key)
        try:
            payload = self._encode(value)
        except (TypeError, ValueError) as exc:
            raise StoreError(f"Cannot serialise value for {key}: {exc}") from exc
        self._write_bytes(path, payload)

    def remove(self, key: str) -> None:
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as exc:  # pragma: no cover - surfaced to callers
            raise StoreError(str(exc)) from exc

    def keys(self) -> Iterator[str]:
        for path in sorted(self.root.glob(f"*{self.suffix}")):
            yield path.name[: -len(self.suffix)]


def _derive_key(secret: str) -> bytes:
    if not secret:
        secret = "storefront-dev-secret"
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


class EncryptedKeyValueStore(KeyValueStore):
    """Key-value store that encrypts payloads using Fernet symmetric encryption."""

    suffix = ".enc"

    def __init__(self, root: Path | str, secret: str):
        super().__init__(root)
        self._fernet = Fernet(_derive_key(secret))

    def _encode(self, value: Any) -> bytes:  # type: ignore[override]
        return self._fernet.encrypt(super()._encode(value))

    def _decode(self, blob: bytes) -> Any:  # type: ignore[override]
        try:
            decrypted = self._fernet.decrypt(blob)
        except InvalidToken as exc:
            raise DecodeFailure("payload could not be decrypted") from exc
        return super()._decode(decrypted)
