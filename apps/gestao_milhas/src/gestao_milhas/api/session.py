"""Caller identity resolved from the dashboard session cookie."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from gestao_milhas.core.settings import get_settings
from gestao_milhas.db.session import get_db_session
from gestao_milhas.domain.errors import InvalidSessionError, compose_error_message
from gestao_milhas.repositories.user_repository import UserRepository


@dataclass(slots=True, frozen=True)
class SessionUser:
    """Payload carried by the session cookie."""

    id: UUID
    login: str
    role: str
    team: str


def encode_session_cookie(user: SessionUser) -> str:
    """Serialize a session payload as unpadded base64url JSON."""

    payload = json.dumps(
        {
            "id": str(user.id),
            "login": user.login,
            "role": user.role,
            "team": user.team,
        }
    )
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def decode_session_cookie(raw: str | None) -> SessionUser | None:
    """Parse a session cookie value, returning None when it is unusable."""

    if not raw:
        return None
    padded = raw.strip() + "=" * (-len(raw.strip()) % 4)
    try:
        payload = json.loads(base64.urlsafe_b64decode(padded).decode("utf-8"))
        return SessionUser(
            id=UUID(str(payload["id"])),
            login=str(payload.get("login") or ""),
            role=str(payload.get("role") or ""),
            team=str(payload.get("team") or ""),
        )
    except (
        binascii.Error,
        UnicodeDecodeError,
        json.JSONDecodeError,
        KeyError,
        TypeError,
        ValueError,
    ):
        return None


def get_session_user(
    request: Request,
    session: Annotated[Session, Depends(get_db_session)],
) -> SessionUser:
    """Resolve the logged-in operator or fail with an invalid session error."""

    cookie_name = get_settings().session_cookie_name
    session_user = decode_session_cookie(request.cookies.get(cookie_name))
    if session_user is None:
        raise InvalidSessionError()

    if UserRepository(session).get(session_user.id) is None:
        raise InvalidSessionError(
            message=compose_error_message(
                cause="Session user does not exist anymore.",
                action="Log in again and repeat the operation.",
            )
        )
    return session_user
