"""
Base model for podreaper models using Pydantic.
"""

from pydantic import BaseModel, ConfigDict


class BasePodReaperModel(BaseModel):
    """Base model with common configuration using Pydantic v2 style."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        frozen=True,
    )
