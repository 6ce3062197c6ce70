from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Union

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MText:
    text: str


@dataclass(frozen=True)
class MLink:
    text: str
    href: str


MessagePart = Union[MText, MLink]


def _render_messages(messages: list[MessagePart]) -> list[dict]:
    out: list[dict] = []
    for part in messages:
        if isinstance(part, MLink):
            out.append({"type": "link", "text": part.text, "href": part.href})
        else:
            out.append({"type": "text", "text": part.text})
    return out


class ErrorResponse(Exception):
    """
    A fully formed error response.

    Raised by handlers, and returned (not raised) by auth-failure hooks that
    want to replace the generic failure.
    """

    def __init__(
        self,
        status_code: int,
        title: str,
        messages: list[MessagePart] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(title)
        self.status_code = status_code
        self.title = title
        self.messages = list(messages or [])
        self.headers = dict(headers or {})

    def to_payload(self) -> dict:
        return {
            "detail": self.title,
            "message": "".join(p.text for p in self.messages),
            "messages": _render_messages(self.messages),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorResponse):
            return NotImplemented
        return (self.status_code, self.title, self.messages, self.headers) == (
            other.status_code,
            other.title,
            other.messages,
            other.headers,
        )

    __hash__ = None  # type: ignore[assignment]


class AppError(ErrorResponse):
    status_code_default = 500

    def __init__(self, title: str, messages: list[MessagePart] | None = None, headers: dict[str, str] | None = None):
        super().__init__(self.status_code_default, title, messages, headers)


class NotFound(AppError):
    status_code_default = 404


class BadRequest(AppError):
    status_code_default = 400


class Conflict(AppError):
    """The account already has credentials; refuse to overwrite them."""

    # Reported as a plain 400 to admin clients.
    status_code_default = 400


class Forbidden(AppError):
    status_code_default = 403


class UnsupportedMediaType(AppError):
    status_code_default = 415


class AuthenticationFailed(AppError):
    """
    Unknown user, missing record and wrong password all look the same to
    the caller.
    """

    status_code_default = 401

    def __init__(self, realm: str):
        super().__init__(
            "Authentication failed",
            [MText("The username or password was not accepted.")],
            headers={"WWW-Authenticate": f'Basic realm="{realm}"'},
        )
        self.realm = realm


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ErrorResponse)
    async def _error_response_handler(request: Request, exc: ErrorResponse):  # noqa: ARG001
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=exc.headers or None)

    @app.exception_handler(sqlite3.OperationalError)
    async def _sqlite_unavailable_handler(request: Request, exc: sqlite3.OperationalError):
        logger.error(f"Database unavailable while handling {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"detail": "db_unavailable"})
