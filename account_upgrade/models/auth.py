from typing import Literal, Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Login request model"""
    username: str = Field(min_length=1)
    password: str


class TokenResponse(BaseModel):
    """Token response model"""
    access_token: str
    token_type: str = "bearer"


class ErrorMessagePart(BaseModel):
    """One piece of an error message: plain text, or a link to follow"""
    type: Literal["text", "link"]
    text: str
    href: Optional[str] = None


class ErrorPayload(BaseModel):
    """Body of every error raised as an ErrorResponse"""
    detail: str
    message: str = ""
    messages: list[ErrorMessagePart] = []


ERROR_RESPONSES = {
    400: {"model": ErrorPayload},
    401: {"model": ErrorPayload},
    403: {"model": ErrorPayload},
    404: {"model": ErrorPayload},
    415: {"model": ErrorPayload},
}
