from typing import Optional

from pydantic import BaseModel, Field


class LoginPayload(BaseModel):
    """
    Schema for admin login. Both fields are checked in the handler so a
    missing one yields the "Missing credentials" error.
    """

    username: Optional[str] = Field(None, description="Admin username")
    password: Optional[str] = Field(None, description="Admin password")
