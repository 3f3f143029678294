"""Token storage for persistent authorization.

The TV issues a token once the user allows the app; presenting it on later
connections skips the on-screen prompt. Tokens are stored per TV id, with
the host as a fallback key for TVs that were never discovered.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

_LOGGER = logging.getLogger(__name__)


class TokenStorage:
    """Manages persistent storage of authorization tokens per TV."""

    DEFAULT_STORAGE_PATH = Path.home() / ".config" / "samsung_tv" / "tokens.json"

    def __init__(self, storage_path: Optional[Path] = None):
        """Initialize token storage.

        Args:
            storage_path: Path to token storage file.
                Defaults to ~/.config/samsung_tv/tokens.json
        """
        self.storage_path = Path(storage_path) if storage_path else self.DEFAULT_STORAGE_PATH

    def _load_all(self) -> Dict[str, Any]:
        """Load all stored tokens."""
        if not self.storage_path.exists():
            return {}
        try:
            with open(self.storage_path, "r") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            _LOGGER.warning("Could not read %s: %s", self.storage_path, e)
            return {}

    def _save_all(self, data: Dict[str, Any]):
        """Save all tokens to storage."""
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.storage_path, "w") as f:
            json.dump(data, f, indent=2)

    def _find_token(self, tv_id: Optional[str] = None, host: Optional[str] = None) -> tuple:
        """Find token entry by TV id, then by host.

        Returns:
            Tuple of (key, token_data) or (None, None) if not found
        """
        data = self._load_all()

        if tv_id and tv_id in data:
            return tv_id, data[tv_id]

        if host:
            if host in data:
                return host, data[host]
            for key, token_data in data.items():
                if token_data.get("host") == host:
                    return key, token_data

        return None, None

    def get_token(self, tv_id: Optional[str] = None, host: Optional[str] = None) -> Optional[str]:
        """Get the stored token for a TV.

        Args:
            tv_id: TV id
            host: TV IP address (fallback lookup)

        Returns:
            Token string, or None if no token is stored
        """
        _, token_data = self._find_token(tv_id, host)
        if token_data is None:
            return None
        return token_data.get("token") or None

    def save_token(
        self,
        token: str,
        tv_id: Optional[str] = None,
        host: Optional[str] = None,
        app_name: Optional[str] = None,
        name: Optional[str] = None,
    ):
        """Save the token for a TV.

        Args:
            token: Token issued by the TV
            tv_id: TV id - used as storage key when known
            host: TV IP address - storage key when tv_id is unknown
            app_name: App name the token was issued to
            name: TV display name
        """
        key = tv_id or host
        if not key:
            raise ValueError("tv_id or host is required")

        data = self._load_all()

        # Drop a host-keyed entry once the TV id is known
        if tv_id and host and host in data and host != tv_id:
            del data[host]

        data[key] = {
            "tv_id": tv_id,
            "host": host,
            "token": token,
            "app_name": app_name,
            "name": name,
            "saved_at": time.time(),
        }
        self._save_all(data)
        _LOGGER.debug("Saved token for %s", key)

    def delete_token(self, tv_id: Optional[str] = None, host: Optional[str] = None) -> bool:
        """Delete the stored token for a TV.

        Returns:
            True if a token was deleted
        """
        data = self._load_all()
        key, _ = self._find_token(tv_id, host)

        if key and key in data:
            del data[key]
            self._save_all(data)
            return True
        return False

    def list_devices(self) -> List[Dict[str, Any]]:
        """List all TVs with stored tokens."""
        devices = []
        for key, token_data in self._load_all().items():
            devices.append({
                "tv_id": token_data.get("tv_id") or key,
                "host": token_data.get("host"),
                "name": token_data.get("name"),
                "app_name": token_data.get("app_name"),
                "saved_at": token_data.get("saved_at"),
            })
        return devices

    def clear_all(self):
        """Clear all stored tokens."""
        self._save_all({})


# Global default storage instance
_default_storage: Optional[TokenStorage] = None


def get_storage(storage_path: Optional[Path] = None) -> TokenStorage:
    """Get the default token storage instance."""
    global _default_storage
    if _default_storage is None or storage_path is not None:
        _default_storage = TokenStorage(storage_path)
    return _default_storage


def get_token(tv_id: Optional[str] = None, host: Optional[str] = None) -> Optional[str]:
    """Get token for TV."""
    return get_storage().get_token(tv_id, host)


def save_token(token: str, tv_id: Optional[str] = None, host: Optional[str] = None, **kwargs):
    """Save token for TV."""
    get_storage().save_token(token, tv_id=tv_id, host=host, **kwargs)


def delete_token(tv_id: Optional[str] = None, host: Optional[str] = None) -> bool:
    """Delete token for TV."""
    return get_storage().delete_token(tv_id, host)
