"""Shared response envelopes."""

from pydantic import BaseModel


class OkResponse(BaseModel):
    """Response carrying only a success flag."""

    ok: bool = True


class ErrorResponse(BaseModel):
    """Error envelope returned for every failed request."""

    ok: bool = False
    message: str
