"""Common Marshmallow building blocks for reading exported batches."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from bson import ObjectId
from marshmallow import EXCLUDE, Schema, fields, pre_load

EMPTY_OBJECT_ID = "0" * 24

_KEY_NOISE = re.compile(r"[_\-\s]")


def normalize_key(key: str) -> str:
    """Fold a JSON key or attribute name for case-insensitive matching.

    ``UserId``, ``userId`` and ``user_id`` all fold to ``userid``.
    """
    return _KEY_NOISE.sub("", key).lower()


def new_object_id() -> str:
    """Return a freshly generated 24-hex object id."""
    return str(ObjectId())


class ObjectIdField(fields.Field):
    """Object-id field accepting ``"<hex>"`` or ``{"$oid": "<hex>"}``.

    Anything that does not parse is replaced by a freshly generated id
    instead of failing the load. ``null`` is kept only when the field
    allows it; otherwise it too becomes a fresh id.
    """

    def deserialize(self, value: Any, attr: str | None = None, data: Any = None, **kwargs: Any):
        if value is None and not self.allow_none:
            return new_object_id()
        return super().deserialize(value, attr, data, **kwargs)

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> str:
        if isinstance(value, Mapping):
            value = value.get("$oid")
        if isinstance(value, str) and ObjectId.is_valid(value):
            return value.lower()
        return new_object_id()

    def _serialize(self, value: Any, attr: str | None, obj: Any, **kwargs: Any) -> str | None:
        return None if value is None else str(value)


class CaseInsensitiveSchema(Schema):
    """Schema matching incoming keys to fields regardless of case.

    Unknown keys are dropped. Explicit ``null`` values reach the fields
    untouched, so "present but null" stays distinguishable from "missing".
    """

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def fold_keys(self, data: Any, **_: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        lookup = {normalize_key(name): name for name in self.load_fields}
        folded: dict[str, Any] = {}
        for key, value in data.items():
            target = lookup.get(normalize_key(str(key)))
            if target is not None:
                folded[target] = value
        return folded
