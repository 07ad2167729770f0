"""
structdiff — Three-way structural partition of nested data
==========================================================

Compares two untyped trees (records, sequences, scalars) and sorts
every difference into one of three disjoint buckets:

    detailed_partition({"a": 1, "b": 2}, {"a": 1, "c": 3})
        → added   {"c": 3}
          deleted {"b": REMOVED}
          updated {}

    detailed_partition({"a": {"x": 1}}, {"a": {"x": 2}})
        → updated {"a": Partition(updated={"x": Replacement(2)})}

Records are compared by key, sequences by position, and scalars are
replaced whole.  A change of kind (record → list, bool → number, ...)
is always a whole Replacement.

The result is meant for change reports and release tooling; this
package draws no conclusions about what a change means.
"""

import logging

from structdiff.core import (
    # Types
    Kind,
    kind_of,
    SCALAR_KINDS,
    REMOVED,
    Replacement,
    Partition,
    Category,
    # Comparators
    Comparator,
    compare,
    compare_sequences,
    compare_records,
    values_equal,
    apply_partition,
    # Errors
    PartitionError,
    UnsupportedValueError,
    CyclicInputError,
    DepthLimitError,
)
from structdiff.config import (
    Settings, settings, load_settings, apply_log_level, ConfigurationError,
)
from structdiff.partition import (
    PartitionEngine,
    detailed_partition,
    partition_added,
    partition_deleted,
    partition_updated,
    flatten,
)
from structdiff.formats import from_python, from_json, to_python, to_json

logging.getLogger(__name__).addHandler(logging.NullHandler())
apply_log_level(settings)

__version__ = "0.1.0"
__all__ = [
    "Kind", "kind_of", "SCALAR_KINDS", "REMOVED", "Replacement", "Partition", "Category",
    "Comparator", "compare", "compare_sequences", "compare_records",
    "values_equal", "apply_partition",
    "PartitionError", "UnsupportedValueError", "CyclicInputError", "DepthLimitError",
    "Settings", "settings", "load_settings", "apply_log_level", "ConfigurationError",
    "PartitionEngine", "detailed_partition",
    "partition_added", "partition_deleted", "partition_updated", "flatten",
    "from_python", "from_json", "to_python", "to_json",
]
