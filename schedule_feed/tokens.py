"""Per-user calendar tokens.

A token is ``sha256("<user_id>-<secret>-calendar")`` truncated to 32 hex
characters. It is never stored: resolving a token means recomputing the
token of every candidate user and comparing.
"""

import hashlib
import logging
import re
import threading
import time
from typing import Callable, Iterable

from schedule_feed.constants import TOKEN_LENGTH
from schedule_feed.exceptions import ConfigurationError
from schedule_feed.models.records import UserRecord
from schedule_feed.storage.base import ScheduleRepository

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(rf"[0-9a-f]{{{TOKEN_LENGTH}}}")


def derive_token(user_id: int, secret: str | None) -> str:
    """Derive the calendar token for a user.

    Raises:
        ConfigurationError: If the secret is unset or empty.
    """
    if not secret:
        raise ConfigurationError("Calendar secret is not configured")
    digest = hashlib.sha256(f"{user_id}-{secret}-calendar".encode("utf-8"))
    return digest.hexdigest()[:TOKEN_LENGTH]


def is_token_shaped(token: str | None) -> bool:
    """True if ``token`` is exactly 32 lowercase hex characters."""
    return isinstance(token, str) and _TOKEN_RE.fullmatch(token) is not None


class TokenAuthority:
    """Derives and resolves calendar tokens under one server secret."""

    def __init__(self, secret: str | None, max_users: int = 10000):
        self.secret = secret
        self.max_users = max_users

    def token_for(self, user_id: int) -> str:
        return derive_token(user_id, self.secret)

    def feed_url(self, user_id: int, base_url: str) -> str:
        """Subscription URL of the user's feed."""
        return f"{base_url.rstrip('/')}/calendar/{self.token_for(user_id)}.ics"

    def check_configured(self) -> None:
        """Raise ConfigurationError if no usable secret is set."""
        if not self.secret:
            raise ConfigurationError("Calendar secret is not configured")

    def resolve(self, token: str, users: Iterable[UserRecord]) -> int | None:
        """Find the user a token belongs to by linear scan.

        At most ``max_users`` candidates are checked. Returns the user id or
        None. Tokens that are not 32 lowercase hex characters are rejected
        without looking at ``users``.

        Raises:
            ConfigurationError: If the secret is unset, whatever the token.
        """
        self.check_configured()
        if not is_token_shaped(token):
            return None

        for checked, user in enumerate(users):
            if checked >= self.max_users:
                logger.warning(
                    f"Token scan stopped at the configured cap of {self.max_users} users"
                )
                break
            if self.token_for(user.id) == token:
                return user.id
        return None

    def resolve_from(self, token: str, repository: ScheduleRepository) -> int | None:
        """Resolve a token against the users of a repository.

        The repository is only queried for tokens of the right shape.
        """
        self.check_configured()
        if not is_token_shaped(token):
            return None
        return self.resolve(token, repository.list_users(limit=self.max_users))


class TokenIndex:
    """Keyed token lookup built from the user list.

    The index is rebuilt on a miss so newly created users resolve without a
    restart, but at most once per ``min_rebuild_interval`` seconds: unknown
    tokens inside that window miss without touching the repository.
    Derivation stays in ``TokenAuthority``; the index only replaces the
    per-request linear scan.
    """

    def __init__(
        self,
        authority: TokenAuthority,
        repository: ScheduleRepository,
        min_rebuild_interval: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.authority = authority
        self.repository = repository
        self.min_rebuild_interval = min_rebuild_interval
        self._clock = clock
        self._tokens: dict[str, int] | None = None
        self._built_at: float | None = None
        self._lock = threading.Lock()

    def rebuild(self) -> None:
        """Recompute the token map from the repository."""
        users = self.repository.list_users(limit=self.authority.max_users)
        tokens: dict[str, int] = {}
        for user in users:
            token = self.authority.token_for(user.id)
            if token in tokens and tokens[token] != user.id:
                raise ConfigurationError(
                    f"Calendar token collision between users {tokens[token]} and {user.id}"
                )
            tokens[token] = user.id
        with self._lock:
            self._tokens = tokens
            self._built_at = self._clock()
        logger.info(f"Built calendar token index for {len(tokens)} users")

    def _is_fresh(self) -> bool:
        return (
            self._built_at is not None
            and self._clock() - self._built_at < self.min_rebuild_interval
        )

    def lookup(self, token: str) -> int | None:
        """Resolve a token, rebuilding a stale index once on a miss."""
        self.authority.check_configured()
        if not is_token_shaped(token):
            return None

        with self._lock:
            tokens = self._tokens
            fresh = self._is_fresh()
        if tokens is not None and token in tokens:
            return tokens[token]
        if tokens is not None and fresh:
            logger.debug("Calendar token missed a fresh index; not rebuilding")
            return None

        self.rebuild()
        with self._lock:
            return self._tokens.get(token)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens or {})
