"""
=============================================================================
HANDLERS MODULE
=============================================================================

Request handlers: the business logic between a scanned request and its
response.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    REQUEST → HANDLER → RESPONSE                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    Request                 Handler                 Response         │
    │   ┌─────────┐           ┌─────────┐           ┌─────────┐          │
    │   │ POST    │           │ decode  │           │ 201     │          │
    │   │ /tasks  │ ────────▶ │ store   │ ────────▶ │ Created │          │
    │   │ {...}   │           │ encode  │           │ {...}   │          │
    │   └─────────┘           └─────────┘           └─────────┘          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .tasks import TaskHandler

__all__ = [
    "TaskHandler",
]
