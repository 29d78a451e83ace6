"""Signup and login flows exercised directly against the service."""

from __future__ import annotations

import asyncio

import pytest

from fakes import FakeAccountRepository
from qfoods.domain.account import Account
from qfoods.domain.contracts import SignupInput
from qfoods.domain.errors import DuplicateKey, InvalidCredentials, MalformedCredentials
from qfoods.domain.service import AccountService
from qfoods.security.basic_auth import encode_basic_credentials
from qfoods.security.throttle import SlidingWindowLoginThrottle


def _service(repository: FakeAccountRepository) -> AccountService:
    return AccountService(repository, SlidingWindowLoginThrottle(max_failures=5, window_seconds=60))


def test_concurrent_signups_for_same_username_have_one_winner():
    repository = FakeAccountRepository()
    service = _service(repository)

    async def race():
        return await asyncio.gather(
            service.signup(SignupInput("dave", "d1@x.com", "pw1")),
            service.signup(SignupInput("dave", "d2@x.com", "pw2")),
            return_exceptions=True,
        )

    results = asyncio.run(race())

    winners = [result for result in results if isinstance(result, Account)]
    losers = [result for result in results if isinstance(result, DuplicateKey)]
    assert len(winners) == 1
    assert len(losers) == 1
    assert losers[0].field == "username"
    assert list(repository.accounts) == ["dave"]


def test_signup_then_login_returns_username():
    service = _service(FakeAccountRepository())

    async def flow():
        await service.signup(SignupInput("erin", "e@x.com", "p@ss word"))
        return await service.login(encode_basic_credentials("erin", "p@ss word"))

    assert asyncio.run(flow()).username == "erin"


def test_duplicate_username_rejected_by_lookup():
    repository = FakeAccountRepository()
    service = _service(repository)
    asyncio.run(service.signup(SignupInput("frank", "f@x.com", "pw")))

    with pytest.raises(DuplicateKey, match="username already exists"):
        asyncio.run(service.signup(SignupInput("frank", "other@x.com", "different")))


def test_login_failures_raise_typed_errors():
    repository = FakeAccountRepository()
    service = _service(repository)
    asyncio.run(service.signup(SignupInput("gina", "g@x.com", "pw")))

    with pytest.raises(MalformedCredentials):
        asyncio.run(service.login(None))
    with pytest.raises(InvalidCredentials):
        asyncio.run(service.login(encode_basic_credentials("gina", "PW")))
    with pytest.raises(InvalidCredentials):
        asyncio.run(service.login(encode_basic_credentials("Gina", "pw")))
