"""Base model configuration for data parsed from framework output."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model that accepts both field names and aliases.

    Unknown keys are ignored so that reports carrying framework-specific
    extras still validate.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")
