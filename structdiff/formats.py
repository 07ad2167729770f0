"""
structdiff.formats — Convert between real-world data and partition results.

Supported conversions:
    • Python objects → validated, detached input trees
    • JSON strings   → input trees
    • Partition / Replacement / REMOVED → plain JSON-compatible data
"""

import json
from collections.abc import Mapping
from typing import Any

from .core import REMOVED, Comparator, Partition, Replacement


# ═══════════════════════════════════════════════════════════════════
#  INPUT TREES
# ═══════════════════════════════════════════════════════════════════

def from_python(obj: Any) -> Any:
    """
    Validate a Python object as an input tree and return a detached copy.

    Mapping:
        None, bool, int, float, str → unchanged
        Mapping                     → dict (keys must be strings)
        list / tuple                → list / tuple

    Raises UnsupportedValueError on any other node and CyclicInputError
    on a self-containing object.
    """
    comparator = Comparator(copy_values=True)
    return comparator.run(comparator.detach, obj)


def from_json(text: str) -> Any:
    """Parse a JSON snapshot into an input tree."""
    return from_python(json.loads(text))


# ═══════════════════════════════════════════════════════════════════
#  RESULTS → PLAIN DATA
# ═══════════════════════════════════════════════════════════════════

def to_python(value: Any, removed: Any = None) -> Any:
    """
    Convert a partition, a projection or a flattened view to plain data.

    Nested partitions become {"added", "deleted", "updated"} dicts,
    replacements become their values, and the REMOVED marker becomes
    `removed` (None by default, i.e. JSON null).
    """
    if value is REMOVED:
        return removed
    if isinstance(value, Replacement):
        return to_python(value.value, removed)
    if isinstance(value, Partition):
        return to_python(value.to_dict(), removed)
    if isinstance(value, Mapping):
        return {key: to_python(item, removed) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_python(item, removed) for item in value]
    return value


def to_json(value: Any, removed: Any = None, **kwargs) -> str:
    """Convert a partition or view to a JSON string.  Sequence indices become string keys."""
    return json.dumps(to_python(value, removed), **kwargs)
