"""RegisterRequest model."""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, description="Display name for the new identity")
