"""Account service implementing the signup and login flows."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from email_validator import EmailNotValidError, validate_email

from .account import Account
from .contracts import SignupInput
from .errors import DuplicateKey, InvalidCredentials, TooManyAttempts, ValidationError
from ..security.basic_auth import parse_basic_authorization
from ..security.passwords import hash_password, verify_password, verify_unknown_account
from ..security.throttle import LoginThrottle

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    async def find_by_username(self, username: str) -> Account | None: ...

    async def insert(self, account: Account) -> Account: ...


@dataclass(slots=True)
class LoginOutcome:
    username: str


class AccountService:
    """Signup and login workflows backed by the credential store."""

    def __init__(self, repository: CredentialStore, throttle: LoginThrottle) -> None:
        self._repository = repository
        self._throttle = throttle

    async def signup(self, payload: SignupInput) -> Account:
        """Register a new account.

        The username lookup only short-circuits the common duplicate case; the
        store's unique constraints decide concurrent signups and email
        collisions, surfacing as ``DuplicateKey`` from ``insert``.
        """
        if (
            not payload.password
            or any(value is None or not value.strip() for value in (payload.username, payload.email))
        ):
            raise ValidationError("all fields are required")
        # Basic credentials split on the first colon, so such a name could never log in.
        if ":" in payload.username:
            raise ValidationError("username must not contain ':'")
        try:
            validate_email(payload.email, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValidationError("invalid email address") from exc

        if await self._repository.find_by_username(payload.username) is not None:
            raise DuplicateKey("username already exists", field="username")

        secret = await asyncio.to_thread(hash_password, payload.password)
        account = await self._repository.insert(
            Account(
                username=payload.username,
                email=payload.email,
                secret=secret,
                created_at=datetime.now(timezone.utc),
            )
        )
        logger.info("registered account %s", account.username)
        return account

    async def login(self, authorization: str | None) -> LoginOutcome:
        """Verify a Basic ``Authorization`` header against the stored secret.

        Unknown usernames and wrong passwords fail identically. Nothing in the
        credential store changes.
        """
        credentials = parse_basic_authorization(authorization)
        username = credentials.username

        if await self._throttle.is_blocked(username):
            logger.warning("login throttled for %s", username)
            raise TooManyAttempts("too many failed login attempts, try again later")

        account = await self._repository.find_by_username(username)
        if account is None:
            verified = await asyncio.to_thread(verify_unknown_account, credentials.password)
        else:
            verified = await asyncio.to_thread(verify_password, account.secret, credentials.password)

        if not verified:
            await self._throttle.record_failure(username)
            logger.warning("failed login for %s", username)
            raise InvalidCredentials("invalid username or password")

        await self._throttle.reset(username)
        return LoginOutcome(username=account.username)
