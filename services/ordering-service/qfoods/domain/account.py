from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Account:
    """A registered user's identity and hashed credential."""

    username: str
    email: str
    secret: str
    created_at: datetime
