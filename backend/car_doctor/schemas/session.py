"""
Car Doctor Backend — Session Schemas
======================================

What:  Request/response contracts for login and logout, plus the
       per-request `Identity` decoded from a session token.
"""

from pydantic import BaseModel, Field


class SessionRequest(BaseModel):
    """
    Body of POST /session.

    The email is trusted as given: no password or ownership check happens
    at issuance time.
    """
    email: str = Field(min_length=1, description="Email the session is issued for")


class SessionResponse(BaseModel):
    success: bool = Field(default=True)


class LogoutResponse(BaseModel):
    logout: bool = Field(default=True)


class Identity(BaseModel):
    """
    The verified caller, decoded from the `token` cookie.

    Exists only for the duration of one request (`request.state.identity`).
    """
    email: str

    model_config = {"frozen": True}
