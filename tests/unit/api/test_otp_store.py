"""
Tests for the Redis-backed OTP store.
"""

import pytest
import redis

from dealerhub.api.services.otp_store import OTPStoreError, RedisOTPStore, generate_otp


def test_generated_codes_are_six_digits():
    for _ in range(200):
        code = generate_otp()
        assert len(code) == 6 and code.isdigit()


def test_issue_stores_code_with_ttl(otp_store, fake_redis):
    code = otp_store.issue(7)

    assert fake_redis.data["otp:7"] == code
    assert fake_redis.ttls["otp:7"] == 300


def test_ttl_follows_settings(monkeypatch, fake_redis):
    from dealerhub.api.config import reset_settings

    monkeypatch.setenv("OTP_TTL_SECONDS", "60")
    reset_settings()

    RedisOTPStore(client=fake_redis).issue(1)

    assert fake_redis.ttls["otp:1"] == 60


def test_verify_consumes_code(otp_store):
    code = otp_store.issue(7)

    assert otp_store.verify(7, code) is True
    assert otp_store.verify(7, code) is False


def test_concurrent_readers_consume_once(otp_store, fake_redis, monkeypatch):
    code = otp_store.issue(7)
    # Both requests read the code before either deletes it
    monkeypatch.setattr(fake_redis, "get", lambda key: code)

    assert otp_store.verify(7, code) is True
    assert otp_store.verify(7, code) is False


def test_wrong_code_is_kept(otp_store):
    code = otp_store.issue(7)
    wrong = "000000" if code != "000000" else "111111"

    assert otp_store.verify(7, wrong) is False
    assert otp_store.verify(7, code) is True


def test_codes_are_per_user(otp_store):
    code = otp_store.issue(7)

    assert otp_store.verify(8, code) is False


def test_reissue_replaces_pending_code(otp_store, fake_redis):
    otp_store.issue(7)
    latest = otp_store.issue(7)

    assert fake_redis.data["otp:7"] == latest

    assert otp_store.verify(7, latest) is True


def test_expired_code(otp_store, fake_redis):
    code = otp_store.issue(7)
    fake_redis.expire_now("otp:7")

    assert otp_store.verify(7, code) is False


def test_bytes_from_redis(otp_store, fake_redis):
    fake_redis.data["otp:7"] = b"654321"

    assert otp_store.verify(7, "654321") is True


class BrokenRedis:
    def ping(self):
        return True

    def set(self, *args, **kwargs):
        raise redis.ConnectionError("connection refused")

    def get(self, key):
        raise redis.TimeoutError("timed out")


def test_backend_errors_are_wrapped():
    store = RedisOTPStore(client=BrokenRedis())

    with pytest.raises(OTPStoreError):
        store.issue(1)
    with pytest.raises(OTPStoreError):
        store.verify(1, "123456")


def test_unreachable_server(monkeypatch):
    def refuse(self):
        raise redis.ConnectionError("connection refused")

    monkeypatch.setattr(redis.Redis, "ping", refuse)
    store = RedisOTPStore()

    with pytest.raises(OTPStoreError):
        store.issue(1)
    assert store.ping() is False
