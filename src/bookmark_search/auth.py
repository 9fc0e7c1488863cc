"""Check for a usable Twitter token.

The token is obtained and refreshed by the backend's authorization flow
(``/authorize/twitter``), which writes it to a JSON file:
    {
        "access_token": "...",
        "expires_at": "2025-01-15T14:30:00+00:00"
    }

``expires_at`` may also be a Unix timestamp. This module only reads the file;
it never acquires or refreshes tokens.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

AUTHORIZE_PATH = "/authorize/twitter"


def authorize_url(backend_url: str) -> str:
    return f"{backend_url.rstrip('/')}{AUTHORIZE_PATH}"


class TokenStore:
    def __init__(self, token_file: Path):
        self.token_file = token_file

    def _load(self) -> dict | None:
        if not self.token_file.exists():
            logger.debug("No token file at %s", self.token_file)
            return None
        try:
            data = json.loads(self.token_file.read_text())
        except (OSError, ValueError) as e:
            logger.warning("Unreadable token file %s: %s", self.token_file, e)
            return None
        return data if isinstance(data, dict) else None

    def has_valid_token(self, now: datetime | None = None) -> bool:
        """True if a token is present and has not expired."""
        data = self._load()
        if not data or not data.get("access_token"):
            return False

        expires_at = _parse_expiry(data.get("expires_at"))
        if expires_at is None:
            return False

        now = now or datetime.now(timezone.utc)
        return expires_at >= now

    def __call__(self) -> bool:
        return self.has_valid_token()


def _parse_expiry(value: object) -> datetime | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Unparseable token expiry %r", value)
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return None
