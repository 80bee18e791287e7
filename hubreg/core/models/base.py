"""Pydantic base classes for hubreg's config sections and registry values."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class HubregBaseModel(BaseModel):
    """Base for hubreg models.

    Unknown fields are rejected and assignments are validated like
    construction is.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        populate_by_name=True,
        revalidate_instances="never",
    )


class ImmutableModel(HubregBaseModel):
    """Frozen model for values a RegistrySession is built from."""

    model_config = ConfigDict(frozen=True)
