"""Parsing and building of HTTP ``Authorization: Basic`` credentials."""

from __future__ import annotations

import base64
from dataclasses import dataclass

from ..domain.errors import MalformedCredentials

BASIC_PREFIX = "Basic "


@dataclass(frozen=True, slots=True)
class BasicCredentials:
    username: str
    password: str


def encode_basic_credentials(username: str, password: str) -> str:
    """Return the full header value for ``username:password``."""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"{BASIC_PREFIX}{token}"


def parse_basic_authorization(header: str | None) -> BasicCredentials:
    """Decode a Basic header value into its username and password.

    Only the first ``:`` separates the two parts, so passwords may contain
    colons. Raises ``MalformedCredentials`` for anything that is not a
    well-formed Basic credential.
    """
    if not header or not header.startswith(BASIC_PREFIX):
        raise MalformedCredentials("missing or invalid authorization header")

    token = header[len(BASIC_PREFIX):].strip()
    try:
        decoded = base64.b64decode(token, validate=True).decode("utf-8")
    except ValueError as exc:
        # binascii.Error and UnicodeDecodeError are ValueErrors, as is non-ASCII text
        raise MalformedCredentials("missing or invalid authorization header") from exc

    username, separator, password = decoded.partition(":")
    if not separator or not username:
        raise MalformedCredentials("missing or invalid authorization header")
    return BasicCredentials(username=username, password=password)
