"""Replace id fields on event records with the full directory entity."""
from __future__ import annotations

import copy
from typing import Any, Iterable, MutableMapping

from .directory import Directory

DEFAULT_FIELDS = ("user", "channel")


def inflate(record: Any, field_name: str, directory: Directory) -> Any:
    """Swap ``record[field_name]`` for its entity when it is a known id.

    Mutates ``record`` in place and returns it. Absent fields, non-string
    values and unknown ids leave the record untouched, so a second call on
    an already inflated field does nothing.
    """
    if not isinstance(record, MutableMapping):
        return record
    value = record.get(field_name)
    if not isinstance(value, str):
        return record
    entity = directory.lookup(value)
    if entity is not None:
        record[field_name] = copy.deepcopy(entity)
    return record


def inflate_fields(record: Any, directory: Directory, fields: Iterable[str] = DEFAULT_FIELDS) -> Any:
    for field_name in fields:
        inflate(record, field_name, directory)
    return record
