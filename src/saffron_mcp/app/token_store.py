"""
Session token persistence.

Saffron authenticates with session cookies. To avoid a password login on
every start, the cookies of each account are cached in a single JSON file
in the user's home directory::

    {
      "user@example.com": {
        "cookies": {"sid": "..."},
        "timestamp": 1718000000000
      }
    }

The file is a best-effort cache, not a source of truth: read errors yield
an empty store and write errors are only logged. There is no locking
between processes, so concurrent writers simply overwrite each other.
"""

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, TypeAdapter

logger = logging.getLogger(__name__)

# Cached sessions older than this are discarded.
TOKEN_MAX_AGE_MS = 30 * 24 * 60 * 60 * 1000


class TokenRecord(BaseModel):
    """Cookies saved for one account and the time they were last written."""

    cookies: Dict[str, str]
    timestamp: int


_TOKEN_FILE = TypeAdapter(Dict[str, TokenRecord])


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


class TokenStore:
    """Reads and writes the per-account cookie cache file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else Path.home() / ".saffron-tokens.json"

    def load(self) -> Dict[str, TokenRecord]:
        """
        Read every cached record.

        Returns:
            dict: Account email → TokenRecord. Empty if the file is missing,
                  unreadable, or not in the expected shape.
        """
        try:
            if not self.path.exists():
                return {}
            return _TOKEN_FILE.validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:  # includes pydantic.ValidationError
            logger.error("Error loading tokens from %s: %s", self.path, exc)
            return {}

    def save(self, tokens: Dict[str, TokenRecord]) -> None:
        """Overwrite the cache file with the given records."""
        data = {account: record.model_dump() for account, record in tokens.items()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling file first so a crash never leaves half a file behind.
            fd, tmp_name = tempfile.mkstemp(
                prefix=self.path.name + ".", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            logger.error("Error saving tokens to %s: %s", self.path, exc)

    def load_for_account(self, account: str) -> Optional[Dict[str, str]]:
        """
        Return the cached cookies for an account if they are still fresh.

        Expired records are removed from the file as a side effect.
        """
        tokens = self.load()
        record = tokens.get(account)
        if record is None:
            return None

        if now_ms() - record.timestamp < TOKEN_MAX_AGE_MS:
            return dict(record.cookies)

        logger.info("Cached session for %s has expired", account)
        del tokens[account]
        self.save(tokens)
        return None

    def save_for_account(self, account: str, cookies: Dict[str, str]) -> None:
        """Store the cookies for an account, stamped with the current time."""
        tokens = self.load()
        tokens[account] = TokenRecord(cookies=dict(cookies), timestamp=now_ms())
        self.save(tokens)
