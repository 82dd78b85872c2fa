"""
Component base class for validated data containers.

Components hold state and validate it; the systems that own them decide
how it changes. Using Pydantic gives:
- Validation on construction and on every assignment
- Cheap deep copies
- Readable reprs in logs and test failures

Usage:
    class Health(Component):
        current: int = Field(ge=0)
        maximum: int = Field(ge=0)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all components.

    Assignments are validated, so a value that breaks a field constraint
    or a model validator raises pydantic.ValidationError at the point of
    the bad write instead of surfacing frames later.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra='forbid',
    )

    def clone(self) -> Component:
        """Create a deep copy of this component."""
        return self.model_copy(deep=True)
