from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..security.crypto import InvalidToken, decrypt_token, encrypt_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredToken:
    token: str
    username: str | None
    updated_at: float  # unix timestamp


class TokenStore:
    """
    Local disk slot for the default Buxfer token.
    Stored Fernet-encrypted under <cache_dir>/token.json
    """

    def __init__(self, root_dir: Path, master_key: str | None):
        self.root_dir = root_dir
        self._master_key = master_key

    @property
    def path(self) -> Path:
        return self.root_dir / "token.json"

    def save(self, token: str, username: str | None = None) -> Path:
        payload: dict[str, Any] = {
            "token": encrypt_token(token, self._master_key),
            "username": username,
            "updated_at": time.time(),
        }

        self.root_dir.mkdir(parents=True, exist_ok=True)
        path = self.path
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(path)
        return path

    def load(self) -> StoredToken | None:
        path = self.path
        if not path.exists() or not self._master_key:
            return None

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable token file %s", path)
            return None

        token_enc = data.get("token") if isinstance(data, dict) else None
        if not token_enc:
            return None

        try:
            token = decrypt_token(str(token_enc), self._master_key)
        except (InvalidToken, RuntimeError):
            logger.warning("Stored token cannot be decrypted with the current MASTER_KEY")
            return None

        try:
            updated_at = float(data.get("updated_at") or 0.0)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed updated_at in %s", path)
            updated_at = 0.0

        return StoredToken(
            token=token,
            username=data.get("username"),
            updated_at=updated_at,
        )

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
