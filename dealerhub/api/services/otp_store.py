"""
OTP Store
One-time sign-in codes kept in Redis with a time-to-live, so pending codes
survive restarts and are shared by every API worker.
"""

import logging
import secrets
import threading
from typing import Optional

import redis
from redis.connection import ConnectionPool

from ..config import APISettings, get_settings

logger = logging.getLogger(__name__)


class OTPStoreError(Exception):
    """Exception raised when the OTP backend is unreachable."""

    pass


def generate_otp() -> str:
    """Six-digit numeric code."""
    return str(secrets.randbelow(900000) + 100000)


class RedisOTPStore:
    """
    Redis-backed OTP store.

    Keys are `otp:<user id>`; each code expires after `ttl_seconds` and is
    deleted on first successful verification.
    """

    KEY_PREFIX = "otp"

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        settings: Optional[APISettings] = None,
    ):
        """
        Initialize the OTP store.

        Args:
            client: Redis client; a pooled client is created lazily if omitted
            settings: API settings
        """
        self.settings = settings or get_settings()
        self.ttl_seconds = self.settings.otp_ttl_seconds
        self.client = client
        self.pool: Optional[ConnectionPool] = None

        if client is None:
            self.pool = ConnectionPool(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                decode_responses=True,
                max_connections=20,
                socket_timeout=5,
                socket_connect_timeout=5,
            )

    def _get_client(self) -> redis.Redis:
        """
        Get Redis client (lazy initialization).

        Raises:
            OTPStoreError: If connection fails
        """
        if self.client is None:
            try:
                self.client = redis.Redis(connection_pool=self.pool)
                self.client.ping()
                logger.info(
                    f"Redis OTP store connected: {self.settings.redis_host}:"
                    f"{self.settings.redis_port} (db={self.settings.redis_db})"
                )
            except redis.ConnectionError as e:
                self.client = None
                raise OTPStoreError(f"Failed to connect to Redis: {e}") from e

        return self.client

    def _key(self, user_id: int) -> str:
        return f"{self.KEY_PREFIX}:{user_id}"

    def issue(self, user_id: int) -> str:
        """
        Generate and store a fresh code for a user, replacing any pending one.

        Returns:
            The generated code
        """
        code = generate_otp()
        try:
            self._get_client().set(self._key(user_id), code, ex=self.ttl_seconds)
        except redis.RedisError as e:
            raise OTPStoreError(f"Failed to store OTP for user {user_id}: {e}") from e
        return code

    def verify(self, user_id: int, code: str) -> bool:
        """
        Check a submitted code. A matching code is consumed.

        Consumption is decided by the DEL reply: when two requests read the
        same code, only the one whose delete removed the key is accepted.

        Returns:
            True if the code matched a pending, unexpired code
        """
        key = self._key(user_id)
        try:
            client = self._get_client()
            stored = client.get(key)
            if stored is None:
                return False
            if isinstance(stored, bytes):
                stored = stored.decode("utf-8")
            if not secrets.compare_digest(stored, str(code)):
                return False
            return client.delete(key) == 1
        except redis.RedisError as e:
            raise OTPStoreError(f"Failed to verify OTP for user {user_id}: {e}") from e

    def ping(self) -> bool:
        try:
            return bool(self._get_client().ping())
        except (OTPStoreError, redis.RedisError):
            return False


_store: Optional[RedisOTPStore] = None
_lock = threading.Lock()


def get_otp_store() -> RedisOTPStore:
    """Get the process-wide OTP store (singleton)."""
    global _store
    if _store is None:
        with _lock:
            if _store is None:
                _store = RedisOTPStore()
    return _store
