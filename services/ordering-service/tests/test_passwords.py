from __future__ import annotations

import pytest

from qfoods.security import passwords


class _CountingHasher:
    def __init__(self, inner):
        self._inner = inner
        self.verify_calls = 0

    def hash(self, plain):
        return self._inner.hash(plain)

    def verify(self, secret, plain):
        self.verify_calls += 1
        return self._inner.verify(secret, plain)


@pytest.fixture
def counting_hasher(monkeypatch):
    hasher = _CountingHasher(passwords.get_password_hasher())
    monkeypatch.setattr(passwords, "get_password_hasher", lambda: hasher)
    return hasher


def test_verify_accepts_matching_password():
    secret = passwords.hash_password("pw1")
    assert passwords.verify_password(secret, "pw1") is True
    assert passwords.verify_password(secret, "pw2") is False


def test_empty_password_still_runs_full_verification(counting_hasher):
    secret = passwords.hash_password("pw1")

    assert passwords.verify_password(secret, "") is False
    assert counting_hasher.verify_calls == 1


def test_unknown_account_with_empty_password_runs_verification(counting_hasher):
    assert passwords.verify_unknown_account("") is False
    assert counting_hasher.verify_calls == 1


def test_missing_secret_fails_closed():
    assert passwords.verify_password("", "pw1") is False
