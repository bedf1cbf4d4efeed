"""
=============================================================================
TASK RECORDS AND INPUT ENVELOPES
=============================================================================

    Task          the stored record      {id, description, completed}
    NewTask       POST /tasks body       {description}
    UpdateTask    PUT /tasks/<id> body   {description?, completed?}

Envelopes are input-only shapes: a request body is decoded into one of
them (see taskserver.codec) before the store is touched.

=============================================================================
"""

from dataclasses import dataclass, asdict, replace
from typing import Optional


@dataclass
class Task:
    """A unit of to-do work."""

    id: int
    description: str
    completed: bool = False

    def copy(self) -> "Task":
        """Detached copy, safe to hand out of the store."""
        return replace(self)

    def to_dict(self) -> dict:
        # Field order is the wire order: id, description, completed
        return asdict(self)


@dataclass(frozen=True)
class NewTask:
    """Envelope for creating a task."""

    description: str


@dataclass(frozen=True)
class UpdateTask:
    """
    Envelope for updating a task.

    A field left as None means "keep the stored value". Anything else,
    including False and "", overwrites it.
    """

    description: Optional[str] = None
    completed: Optional[bool] = None
