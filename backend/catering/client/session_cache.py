"""Persistent client-side session (token + user) kept in a small JSON file."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

TOKEN_KEY = "dsis_token"
USER_KEY = "dsis_user"


class SessionCache:
    """
    Key/value store backed by a JSON file.

    Holds the bearer token under `dsis_token` and the logged-in user under
    `dsis_user`. A missing or unreadable file reads as an empty session.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            logger.warning("[session] Ignoring unreadable session file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
        self._save(data)

    def clear(self) -> None:
        self._save({})

    @property
    def token(self) -> Optional[str]:
        return self.get(TOKEN_KEY)

    @property
    def current_user(self) -> Optional[Dict[str, Any]]:
        return self.get(USER_KEY)

    def store_login(self, token: str, user: Dict[str, Any]) -> None:
        data = self._load()
        data[TOKEN_KEY] = token
        data[USER_KEY] = user
        self._save(data)

    def is_logged_in(self) -> bool:
        return self.current_user is not None
