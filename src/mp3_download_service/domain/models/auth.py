from pydantic import BaseModel, Field


class GoogleToken(BaseModel):
    """Model for Google OAuth token."""

    token: str


class EmailCredentials(BaseModel):
    """Email and password pair used to sign up or sign in."""

    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str
