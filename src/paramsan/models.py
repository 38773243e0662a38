"""Base Pydantic models for paramsan.

This module provides the base model class that paramsan's schema models
inherit from. It establishes consistent configuration across all models:

- Immutable instances, so compiled sanitizers can share them across threads
- Consistent serialization behavior

Example:
    >>> from paramsan.models import ParamsanBaseModel
    >>>
    >>> class MyModel(ParamsanBaseModel):
    ...     name: str
    >>>
    >>> MyModel(name="test").model_dump()
    {'name': 'test'}
"""

from pydantic import BaseModel, ConfigDict


class ParamsanBaseModel(BaseModel):
    """Base model for all paramsan Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable for thread safety

    Schema models that must carry arbitrary rule keywords override
    ``extra`` while keeping ``frozen``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
