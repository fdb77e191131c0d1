"""Strict pydantic base shared by the conversion option schemas."""

from pydantic import BaseModel, ConfigDict


class SubcamBaseModel(BaseModel):
    """Rejects unknown keys and re-validates on assignment.

    UserConfig relaxes ``extra`` so that stray option keys from callers are
    ignored; every other layer keeps it strict.
    """

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )
