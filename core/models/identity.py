"""Identity model."""

from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """A registered chat participant.

    Only ``id`` is unique; several connected identities may share a name.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Opaque unique identifier")
    name: str = Field(description="Display name chosen at registration")
