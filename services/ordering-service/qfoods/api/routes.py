"""HTTP routes for signup and login."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Request, status
from prometheus_client import Counter
from pydantic import BaseModel

from ..domain.contracts import SignupInput
from ..domain.errors import ServiceError
from ..domain.service import AccountService
from .errors import http_error

router = APIRouter(tags=["auth"])

AUTH_EVENTS = Counter(
    "qfoods_auth_events",
    "Signup and login outcomes.",
    ["flow", "outcome"],
)


class SignupRequest(BaseModel):
    """Signup payload; presence of each field is enforced by the signup flow."""

    username: str | None = None
    email: str | None = None
    password: str | None = None


class MessageResponse(BaseModel):
    message: str


class LoginResponse(BaseModel):
    message: str
    username: str


def get_service(request: Request) -> AccountService:
    """Resolve the `AccountService` stored on the FastAPI application state."""
    service: AccountService = request.app.state.account_service
    return service


@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    service: AccountService = Depends(get_service),
) -> MessageResponse:
    """Register an account from a username, email and password."""
    try:
        await service.signup(
            SignupInput(
                username=payload.username,
                email=payload.email,
                password=payload.password,
            )
        )
    except ServiceError as exc:
        AUTH_EVENTS.labels(flow="signup", outcome=type(exc).__name__).inc()
        raise http_error(exc) from exc
    AUTH_EVENTS.labels(flow="signup", outcome="success").inc()
    return MessageResponse(message="user registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(
    authorization: str | None = Header(default=None),
    service: AccountService = Depends(get_service),
) -> LoginResponse:
    """Check the Basic credential in the Authorization header. Any body is ignored."""
    try:
        outcome = await service.login(authorization)
    except ServiceError as exc:
        AUTH_EVENTS.labels(flow="login", outcome=type(exc).__name__).inc()
        raise http_error(exc) from exc
    AUTH_EVENTS.labels(flow="login", outcome="success").inc()
    return LoginResponse(message="login successful", username=outcome.username)
