"""Pydantic base for immutable value objects."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Frozen model shared by test metadata and run configuration.

    Unknown fields are rejected, so a misspelt option fails at construction.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
