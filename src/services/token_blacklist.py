import threading
from datetime import datetime
from typing import Dict, Optional


class TokenBlacklist:
    """Revocation set for logged-out tokens.

    Each token is stored with the expiry encoded in it. Once that moment has
    passed the token would fail signature/expiry validation anyway, so
    ``purge_expired`` can drop it and the set stays bounded by the number of
    tokens revoked within one token lifetime.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._tokens: Dict[str, datetime] = {}

    def add(self, token: str, expires_at: datetime) -> None:
        with self._lock:
            # Повторный logout не продлевает запись
            self._tokens.setdefault(token, expires_at)

    def __contains__(self, token: str) -> bool:
        with self._lock:
            return token in self._tokens

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Remove entries whose expiry has passed, return how many were removed"""
        now = now or datetime.utcnow()
        with self._lock:
            expired = [token for token, expires_at in self._tokens.items() if expires_at <= now]
            for token in expired:
                del self._tokens[token]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._tokens.clear()


token_blacklist = TokenBlacklist()
