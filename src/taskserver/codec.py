"""
=============================================================================
JSON CODEC FOR TASK RECORDS
=============================================================================

Decodes request bodies into envelopes and serializes tasks for responses.

=============================================================================
DECODING RULES
=============================================================================

Bodies are decoded strictly, the way a typed JSON decoder would:

    {"description": "buy milk"}              → NewTask("buy milk")
    {"description": "x", "extra": [1, 2]}    → NewTask("x")   unknown keys ignored
    {"completed": true}                      → UpdateTask(completed=True)
    {"completed": null}                      → UpdateTask()   null == absent
    {"completed": 1}                         ✗ integers are not booleans
    {"description": "a", "description": "b"} ✗ duplicate field
    {"description": "x", "tag": 1, "tag": 2} → NewTask("x")   repeats of unknown keys ignored
    {"description": "\\ud800"}              ✗ lone surrogate, not encodable as UTF-8
    [{"description": "x"}]                   ✗ not an object
    {"description": "x"} trailing            ✗ trailing characters
    [[[[ ... thousands deep ... ]]]]         ✗ nesting too deep

Every failure raises EnvelopeError. The handler maps that onto its own
"invalid JSON" response; the exact decoder message only reaches the logs.

=============================================================================
ENCODING
=============================================================================

Output is compact with keys in declaration order and UTF-8 left as is:

    {"id":1,"description":"test","completed":false}

=============================================================================
"""

import json
from typing import Any, Iterable, List, Tuple

from .models import Task, NewTask, UpdateTask


# Keys the envelopes understand; only these may not repeat
KNOWN_FIELDS = ("description", "completed")


class EnvelopeError(ValueError):
    """Raised when a body does not decode into the requested envelope."""


class _Pairs(list):
    """Marks a decoded JSON object, kept as its ordered (key, value) pairs."""


class _IntLiteral(str):
    """
    An integer literal kept as text.

    No envelope field is an integer, so the value is never converted;
    converting would fail on literals past the int digit limit.
    """


def _keep_pairs(pairs: List[Tuple[str, Any]]) -> _Pairs:
    return _Pairs(pairs)


def _reject_constant(name: str):
    raise EnvelopeError(f"invalid number `{name}`")


def _decode_object(text: str) -> dict:
    """
    Decode text that must hold exactly one JSON object.

    Objects are decoded as pair lists first so that a repeated known
    field is caught rather than silently overwritten. Repeated unknown
    keys are ignored along with their values.
    """
    try:
        document = json.loads(
            text,
            object_pairs_hook=_keep_pairs,
            parse_constant=_reject_constant,
            parse_int=_IntLiteral,
        )
    except RecursionError as e:
        raise EnvelopeError("nesting too deep") from e
    except ValueError as e:
        raise EnvelopeError(str(e)) from e

    if not isinstance(document, _Pairs):
        raise EnvelopeError("expected a JSON object")

    fields = {}
    for key, value in document:
        if key in fields and key in KNOWN_FIELDS:
            raise EnvelopeError(f"duplicate field `{key}`")
        fields[key] = value
    return fields


def _check_text(name: str, value: str) -> str:
    # \ud800-style escapes decode to lone surrogates, which cannot be
    # encoded back to UTF-8
    if any(0xD800 <= ord(c) <= 0xDFFF for c in value):
        raise EnvelopeError(f"field `{name}` contains a lone surrogate")
    return value


def _optional(fields: dict, name: str, kind: type, kind_name: str):
    value = fields.get(name)
    if value is None:
        return None
    # bool is a subclass of int; only exact types are accepted
    if type(value) is not kind:
        raise EnvelopeError(f"field `{name}` must be {kind_name}")
    if kind is str:
        return _check_text(name, value)
    return value


def parse_new_task(text: str) -> NewTask:
    """Decode a POST /tasks body."""
    fields = _decode_object(text)
    if "description" not in fields:
        raise EnvelopeError("missing field `description`")
    description = fields["description"]
    if type(description) is not str:
        raise EnvelopeError("field `description` must be a string")
    return NewTask(description=_check_text("description", description))


def parse_update_task(text: str) -> UpdateTask:
    """Decode a PUT /tasks/<id> body. Absent and null fields stay None."""
    fields = _decode_object(text)
    return UpdateTask(
        description=_optional(fields, "description", str, "a string"),
        completed=_optional(fields, "completed", bool, "a boolean"),
    )


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def dumps_task(task: Task) -> str:
    """Serialize one task."""
    return _dumps(task.to_dict())


def dumps_tasks(tasks: Iterable[Task]) -> str:
    """Serialize a sequence of tasks as a JSON array."""
    return _dumps([task.to_dict() for task in tasks])
