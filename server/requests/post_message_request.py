"""PostMessageRequest model."""

from pydantic import BaseModel, Field

from core import Identity


class PostMessageRequest(BaseModel):
    user: Identity
    message: str = Field(description="Message body")
