"""Shared Pydantic base models."""

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """Base model with frozen, extra-forbidding defaults.

    Feed items, passages and configuration bundles are all immutable value
    objects; deriving from this keeps them hashable and safe to share across
    the remote fetch worker threads.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
