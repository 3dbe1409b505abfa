from __future__ import annotations

import hashlib
import hmac
import logging
import math
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Optional

LOGGER = logging.getLogger(__name__)

MANAGE_OPTIONS = "manage_options"
DEFAULT_NONCE_LIFETIME = 24 * 60 * 60


class PermissionDeniedError(PermissionError):
    """The caller may not perform the requested configuration change."""


@dataclass(frozen=True)
class User:
    user_id: str
    display_name: str = ""
    capabilities: FrozenSet[str] = field(default_factory=frozenset)

    def can(self, capability: str) -> bool:
        return capability in self.capabilities


class SessionRegistry:
    """Map opaque session tokens to the users that own them."""

    def __init__(self) -> None:
        self._sessions: Dict[str, User] = {}
        self._lock = threading.Lock()

    def register(self, token: str, user: User) -> None:
        if not token:
            raise ValueError("Session token must not be empty")
        with self._lock:
            self._sessions[token] = user

    def revoke(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def resolve(self, token: Optional[str]) -> Optional[User]:
        if not token:
            return None
        with self._lock:
            return self._sessions.get(token)


class NonceManager:
    """
    Issue and verify time-limited anti-forgery tokens.

    A nonce is an HMAC over the action, user id, session token and the current
    tick, where one tick is half of `lifetime`. Verification accepts the
    current and the previous tick, so a nonce stays valid for at least half and
    at most the whole lifetime.
    """

    def __init__(
        self,
        secret_key: str,
        lifetime: int = DEFAULT_NONCE_LIFETIME,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret_key:
            raise ValueError("A secret key is required to sign nonces")
        if lifetime < 2:
            raise ValueError("Nonce lifetime must be at least two seconds")
        self._secret = secret_key.encode("utf-8")
        self._lifetime = lifetime
        self._clock = clock

    def _tick(self) -> int:
        return math.ceil(self._clock() / (self._lifetime / 2))

    def _digest(self, tick: int, action: str, user_id: str, session_token: str) -> str:
        message = "|".join((str(tick), action, user_id, session_token))
        return hmac.new(
            self._secret, message.encode("utf-8"), hashlib.sha256
        ).hexdigest()[:20]

    def create(self, action: str, user_id: str, session_token: str) -> str:
        return self._digest(self._tick(), action, user_id, session_token)

    def verify(
        self,
        nonce: Optional[str],
        action: str,
        user_id: str,
        session_token: str,
    ) -> bool:
        if not nonce:
            return False
        tick = self._tick()
        for candidate_tick in (tick, tick - 1):
            expected = self._digest(candidate_tick, action, user_id, session_token)
            if hmac.compare_digest(expected, nonce):
                return True
        return False


class AuthenticatedCommand:
    """
    Gate a configuration change behind a capability and a nonce check.

    `authorize` must succeed before the change is applied; on failure it
    raises `PermissionDeniedError` and the caller performs no write.
    """

    def __init__(self, nonces: NonceManager, capability: str = MANAGE_OPTIONS) -> None:
        self._nonces = nonces
        self._capability = capability

    @property
    def nonces(self) -> NonceManager:
        return self._nonces

    @property
    def capability(self) -> str:
        return self._capability

    def authorize(
        self,
        user: Optional[User],
        session_token: Optional[str],
        nonce: Optional[str],
        action: str,
    ) -> User:
        if user is None or not session_token:
            raise PermissionDeniedError("No authenticated session")
        if not self._nonces.verify(nonce, action, user.user_id, session_token):
            LOGGER.warning("Rejected %s for user %s: invalid nonce", action, user.user_id)
            raise PermissionDeniedError("Invalid or expired nonce")
        if not user.can(self._capability):
            LOGGER.warning(
                "Rejected %s for user %s: missing capability %s",
                action,
                user.user_id,
                self._capability,
            )
            raise PermissionDeniedError(f"Missing capability {self._capability}")
        return user

    def run(
        self,
        user: Optional[User],
        session_token: Optional[str],
        nonce: Optional[str],
        action: str,
        mutation: Callable[[], None],
    ) -> None:
        self.authorize(user, session_token, nonce, action)
        mutation()
