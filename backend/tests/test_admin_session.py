"""Admin unlock session: expiry arithmetic, PIN hashing and the unlock token."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from jose import JWTError, jwt

from kintai.core.admin_session import AdminSession
from kintai.core.config import settings
from kintai.core.security import create_unlock_token, decode_token, hash_pin, verify_pin

UNLOCKED = datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc)


class TestAdminSession:
    def test_expires_after_timeout(self):
        session = AdminSession(unlocked_at=UNLOCKED, timeout=timedelta(minutes=5))
        assert session.expires_at == UNLOCKED + timedelta(minutes=5)

    def test_open_within_timeout(self):
        session = AdminSession(unlocked_at=UNLOCKED, timeout=timedelta(minutes=5))
        now = UNLOCKED + timedelta(minutes=4, seconds=59)
        assert not session.is_locked(now)
        assert session.remaining(now) == timedelta(seconds=1)

    def test_locked_at_expiry(self):
        session = AdminSession(unlocked_at=UNLOCKED, timeout=timedelta(minutes=5))
        now = UNLOCKED + timedelta(minutes=5)
        assert session.is_locked(now)
        assert session.remaining(now) == timedelta(0)

    def test_remaining_never_negative(self):
        session = AdminSession(unlocked_at=UNLOCKED, timeout=timedelta(minutes=5))
        assert session.remaining(UNLOCKED + timedelta(hours=1)) == timedelta(0)


class TestPinHashing:
    def test_hash_and_verify(self):
        hashed = hash_pin("1234")
        assert hashed != "1234"
        assert verify_pin("1234", hashed)
        assert not verify_pin("4321", hashed)

    def test_empty_hash_never_verifies(self):
        assert not verify_pin("1234", "")

    def test_malformed_hash_never_verifies(self):
        assert not verify_pin("1234", "not-a-bcrypt-hash")


class TestUnlockToken:
    def test_token_carries_unlock_time(self):
        unlocked = datetime.now(timezone.utc).replace(microsecond=0)
        token = create_unlock_token(unlocked, timedelta(minutes=5))
        payload = decode_token(token)
        assert payload["type"] == "admin_unlock"
        assert payload["iat"] == int(unlocked.timestamp())

    def test_token_signed_with_other_key_is_rejected(self):
        forged = jwt.encode({"type": "admin_unlock"}, "other-key", algorithm=settings.ALGORITHM)
        with pytest.raises(JWTError):
            decode_token(forged)
