"""Rate limiting for job creation, applications and messages.

The limiter only owns the client side of a two-call contract:

* ``check_rate_limit(user, action, limit, window_hours) -> bool`` atomically
  tests the limit and records one use if allowed;
* ``get_rate_limit_remaining(user, action, limit, window_hours)`` reads the
  current state without side effects.

Backends implement the contract with a fixed window and a reset timestamp,
either in the relational store or in Redis. The limiter is advisory: when a
backend fails, the action is allowed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Final, Protocol

import redis
from redis.exceptions import RedisError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from talent_connect.core.errors import RateLimitExceeded, TransportError, ValidationError
from talent_connect.core.settings import settings
from talent_connect.db.time import as_utc, utcnow
from talent_connect.models import RateLimitCounter

logger = logging.getLogger(__name__)

ACTION_CREATE_JOB: Final[str] = "create_job"
ACTION_SEND_APPLICATION: Final[str] = "send_application"
ACTION_SEND_MESSAGE: Final[str] = "send_message"


@dataclass(frozen=True)
class RateLimitConfig:
    limit: int
    window_hours: int

    @property
    def window(self) -> timedelta:
        return timedelta(hours=self.window_hours)


RATE_LIMITS: Final[dict[str, RateLimitConfig]] = {
    ACTION_CREATE_JOB: RateLimitConfig(limit=5, window_hours=24),
    ACTION_SEND_APPLICATION: RateLimitConfig(limit=20, window_hours=24),
    ACTION_SEND_MESSAGE: RateLimitConfig(limit=100, window_hours=24),
}

ACTION_LABELS: Final[dict[str, str]] = {
    ACTION_CREATE_JOB: "Job posting",
    ACTION_SEND_APPLICATION: "Job application",
    ACTION_SEND_MESSAGE: "Messaging",
}


@dataclass(frozen=True)
class RateLimitInfo:
    """Snapshot of a user's allowance for one action."""

    remaining: int
    limit: int
    reset_at: datetime
    used: int | None = None


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    info: RateLimitInfo | None = None


class RateLimitBackend(Protocol):
    """Server-side half of the rate-limit contract."""

    def check_rate_limit(self, user_id: str, action: str, limit: int, window_hours: int) -> bool:
        ...

    def get_rate_limit_remaining(
        self, user_id: str, action: str, limit: int, window_hours: int
    ) -> RateLimitInfo:
        ...


def get_config(action: str) -> RateLimitConfig:
    try:
        return RATE_LIMITS[action]
    except KeyError as err:
        raise ValidationError(f"Unknown rate-limited action: {action}") from err


def action_label(action: str) -> str:
    """Return a human-readable name for a rate-limited action."""
    return ACTION_LABELS.get(action, action.replace("_", " ").capitalize())


def _plural(value: int, unit: str) -> str:
    return f"{value} {unit}" if value == 1 else f"{value} {unit}s"


def describe_reset(reset_at: datetime, now: datetime | None = None) -> str:
    """Format the time left until ``reset_at`` ("now", "12 minutes", "3 hours 5 minutes")."""
    now = now or utcnow()
    seconds = int((as_utc(reset_at) - as_utc(now)).total_seconds())
    if seconds <= 0:
        return "now"
    hours, remainder = divmod(seconds, 3600)
    minutes = remainder // 60
    if hours > 0:
        return f"{_plural(hours, 'hour')} {_plural(minutes, 'minute')}"
    return _plural(minutes, "minute")


class SqlRateLimitBackend:
    """Fixed-window counters stored in the ``rate_limits`` table.

    Each check runs in one transaction and locks the counter row on
    databases that support ``SELECT ... FOR UPDATE``.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def _load(self, user_id: str, action: str, *, lock: bool) -> RateLimitCounter | None:
        stmt = select(RateLimitCounter).where(
            RateLimitCounter.user_id == user_id,
            RateLimitCounter.action == action,
        )
        if lock:
            stmt = stmt.with_for_update()
        return self._db.execute(stmt).scalar_one_or_none()

    def check_rate_limit(self, user_id: str, action: str, limit: int, window_hours: int) -> bool:
        now = utcnow()
        window = timedelta(hours=window_hours)
        try:
            counter = self._load(user_id, action, lock=True)
            if counter is None:
                counter = RateLimitCounter(user_id=user_id, action=action, window_start=now, count=0)
                self._db.add(counter)
            elif as_utc(counter.window_start) + window <= now:
                counter.window_start = now
                counter.count = 0

            allowed = counter.count < limit
            if allowed:
                counter.count += 1
            self._db.commit()
            return allowed
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise TransportError("Rate limit check failed") from exc

    def get_rate_limit_remaining(
        self, user_id: str, action: str, limit: int, window_hours: int
    ) -> RateLimitInfo:
        now = utcnow()
        window = timedelta(hours=window_hours)
        try:
            counter = self._load(user_id, action, lock=False)
        except SQLAlchemyError as exc:
            raise TransportError("Rate limit lookup failed") from exc

        if counter is None or as_utc(counter.window_start) + window <= now:
            return RateLimitInfo(remaining=limit, limit=limit, reset_at=now + window, used=0)
        return RateLimitInfo(
            remaining=max(0, limit - counter.count),
            limit=limit,
            reset_at=as_utc(counter.window_start) + window,
            used=counter.count,
        )


# Increment only while under the limit; the first use starts the window.
_CHECK_AND_INCREMENT_LUA: Final[str] = """
local current = tonumber(redis.call('GET', KEYS[1]) or '0')
if current >= tonumber(ARGV[1]) then
    return 0
end
current = redis.call('INCR', KEYS[1])
if current == 1 then
    redis.call('EXPIRE', KEYS[1], ARGV[2])
end
return 1
"""


class RedisRateLimitBackend:
    """Fixed-window counters kept in Redis keys with a TTL."""

    def __init__(self, client: redis.Redis) -> None:
        self._redis = client
        self._check_script = client.register_script(_CHECK_AND_INCREMENT_LUA)

    @staticmethod
    def key(user_id: str, action: str) -> str:
        return f"ratelimit:{action}:{user_id}"

    def check_rate_limit(self, user_id: str, action: str, limit: int, window_hours: int) -> bool:
        window_seconds = int(timedelta(hours=window_hours).total_seconds())
        try:
            result = self._check_script(keys=[self.key(user_id, action)], args=[limit, window_seconds])
        except RedisError as exc:
            raise TransportError("Rate limit check failed") from exc
        return int(result) == 1

    def get_rate_limit_remaining(
        self, user_id: str, action: str, limit: int, window_hours: int
    ) -> RateLimitInfo:
        now = utcnow()
        key = self.key(user_id, action)
        try:
            pipe = self._redis.pipeline()
            pipe.get(key)
            pipe.ttl(key)
            raw_count, ttl = pipe.execute()
        except RedisError as exc:
            raise TransportError("Rate limit lookup failed") from exc

        if raw_count is None:
            return RateLimitInfo(
                remaining=limit,
                limit=limit,
                reset_at=now + timedelta(hours=window_hours),
                used=0,
            )
        used = int(raw_count)
        # A key without an expiry still belongs to a live window.
        if ttl is not None and int(ttl) > 0:
            reset_at = now + timedelta(seconds=int(ttl))
        else:
            reset_at = now + timedelta(hours=window_hours)
        return RateLimitInfo(
            remaining=max(0, limit - used),
            limit=limit,
            reset_at=reset_at,
            used=used,
        )


class RateLimiter:
    """Client of the rate-limit contract; fails open on backend errors."""

    def __init__(self, backend: RateLimitBackend, *, enabled: bool = True) -> None:
        self._backend = backend
        self._enabled = enabled

    def check_and_consume(self, user_id: str, action: str) -> RateLimitDecision:
        """Consume one use of ``action`` if the user is still under the limit."""
        config = get_config(action)
        if not self._enabled:
            return RateLimitDecision(allowed=True)

        try:
            allowed = self._backend.check_rate_limit(user_id, action, config.limit, config.window_hours)
        except (TransportError, SQLAlchemyError, RedisError, OSError) as exc:
            logger.warning("Rate limit check for %s/%s failed, allowing: %s", user_id, action, exc)
            return RateLimitDecision(allowed=True)

        return RateLimitDecision(allowed=bool(allowed), info=self.peek(user_id, action))

    def peek(self, user_id: str, action: str) -> RateLimitInfo:
        """Read the current allowance without consuming it."""
        config = get_config(action)
        try:
            return self._backend.get_rate_limit_remaining(
                user_id, action, config.limit, config.window_hours
            )
        except (TransportError, SQLAlchemyError, RedisError, OSError) as exc:
            logger.warning("Rate limit lookup for %s/%s failed: %s", user_id, action, exc)
            return RateLimitInfo(
                remaining=config.limit,
                limit=config.limit,
                reset_at=utcnow() + config.window,
            )

    def enforce(self, user_id: str, action: str) -> RateLimitInfo | None:
        """Consume one use or raise :class:`RateLimitExceeded` with the reset time."""
        decision = self.check_and_consume(user_id, action)
        if decision.allowed:
            return decision.info

        info = decision.info or self.peek(user_id, action)
        raise RateLimitExceeded(
            action,
            remaining=info.remaining,
            limit=info.limit,
            reset_at=info.reset_at,
            detail=(
                f"{action_label(action)} limit reached. "
                f"Try again in {describe_reset(info.reset_at)}."
            ),
        )


@lru_cache(maxsize=1)
def get_redis_client() -> redis.Redis:
    """Return the shared Redis client."""
    return redis.Redis.from_url(settings.redis_url)


def get_rate_limiter(db: Session) -> RateLimiter:
    """Build a limiter for the configured backend."""
    backend: RateLimitBackend
    if settings.rate_limit_backend == "redis":
        backend = RedisRateLimitBackend(get_redis_client())
    else:
        backend = SqlRateLimitBackend(db)
    return RateLimiter(backend, enabled=settings.rate_limits_enabled)
