"""Pydantic request/response schemas used by the API.

Request fields are optional so that missing values reach the services'
presence checks instead of failing schema validation.
"""

from pydantic import BaseModel
from typing import Optional


class SignupIn(BaseModel):
    """Payload for the signup endpoint."""
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginIn(BaseModel):
    """Payload for the login endpoint."""
    email: Optional[str] = None
    password: Optional[str] = None
