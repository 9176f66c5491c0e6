"""
Project - the root aggregate.
"""

from typing import ClassVar, Optional
from pydantic import BaseModel, Field

from .base import BaseEntity, Record


class Project(BaseEntity):
    """
    A student project.

    projects.json (or the "projects" KV key) holds a list of these.
    """
    name: str = Field(min_length=1)
    description: Optional[str] = None
    module_name: Optional[str] = None
    supervisor_name: Optional[str] = None

    EDITABLE_FIELDS: ClassVar[tuple[str, ...]] = (
        "name", "description", "module_name", "supervisor_name",
    )

    def apply(self, **changes) -> None:
        """Apply a partial update and refresh updated_at."""
        unknown = set(changes) - set(self.EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Not editable: {', '.join(sorted(unknown))}")

        for field, value in changes.items():
            setattr(self, field, value)
        self.touch()


class ProjectUpdate(BaseModel):
    """Partial update payload. Only fields actually sent are applied."""
    model_config = Record.model_config

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    module_name: Optional[str] = None
    supervisor_name: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
