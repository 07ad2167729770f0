"""
structdiff.partition — Public partition views.

Every view is a pure function of two trees:

    detailed_partition(a, b)   → Partition (added / deleted / updated)
    partition_added(a, b)      → merged tree of everything added
    partition_deleted(a, b)    → merged tree of REMOVED markers
    partition_updated(a, b)    → merged tree of replacement values
    flatten(a, b)              → added, then updated, then deleted,
                                 merged into one mapping

Only two records are partitioned key by key.  Any other pair of roots
(two sequences, two scalars, a record and a list) is either equal,
giving an empty partition, or reported as one whole Replacement.

    >>> detailed_partition({"a": {"x": 1}}, {"a": {"x": 2}}).to_dict()
    {'added': {}, 'deleted': {}, 'updated': {'a': {'added': {}, 'deleted': {}, 'updated': {'x': 2}}}}
    >>> partition_updated({"a": {"x": 1}}, {"a": {"x": 2}})
    {'a': {'x': 2}}
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from . import config
from .config import Settings
from .core import Category, Comparator, Kind, Partition, kind_of

logger = logging.getLogger(__name__)


class PartitionEngine:
    """
    The partition views bound to one set of settings.

    A fresh Comparator is built per call, so one engine may be shared
    between threads as long as the input trees are not mutated while a
    comparison runs.
    """

    name = "positional"
    description = "Index-aligned three-way partition of nested records and sequences"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings if settings is not None else config.settings

    def __repr__(self) -> str:
        return f"PartitionEngine(name={self.name!r}, settings={self.settings!r})"

    def comparator(self) -> Comparator:
        return Comparator(
            max_depth=self.settings.MAX_DEPTH,
            detect_cycles=self.settings.DETECT_CYCLES,
            copy_values=self.settings.COPY_VALUES,
        )

    def detailed(self, original: Any, updated: Any) -> Partition:
        """Full three-way partition of `original` → `updated`."""
        if original is updated:
            return Partition()
        comparator = self.comparator()
        return comparator.run(self._detailed, comparator, original, updated)

    def _detailed(self, comparator: Comparator, original: Any, updated: Any) -> Partition:
        if kind_of(original) is Kind.RECORD and kind_of(updated) is Kind.RECORD:
            result = comparator.compare(original, updated)
            logger.debug(
                f"Partitioned records: {len(result.added)} added, "
                f"{len(result.deleted)} deleted, {len(result.updated)} updated at the root"
            )
            return result

        if comparator.equal(original, updated):
            return Partition()

        logger.debug(
            f"Root values are {kind_of(original).name} and {kind_of(updated).name}; "
            f"reporting a whole replacement"
        )
        return Partition(updated=comparator.supersede(original, updated))

    def added(self, original: Any, updated: Any) -> Any:
        return self.detailed(original, updated).project(Category.ADDED)

    def deleted(self, original: Any, updated: Any) -> Any:
        return self.detailed(original, updated).project(Category.DELETED)

    def updated(self, original: Any, updated: Any) -> Any:
        return self.detailed(original, updated).project(Category.UPDATED)

    def flatten(self, original: Any, updated: Any) -> dict:
        """
        Merge added, then updated, then deleted into one mapping.

        Later categories overwrite earlier ones on a shared top-level key.
        Deleted keys stay present with the REMOVED marker; callers that
        want them absent must drop them.  A root replacement contributes
        its keys when it is a record, its indices when it is a sequence,
        and nothing when it is a scalar.
        """
        detailed = self.detailed(original, updated)
        result: dict = {}
        for category in (Category.ADDED, Category.UPDATED, Category.DELETED):
            _merge_into(result, detailed.project(category))
        return result


def _merge_into(target: dict, tree: Any) -> None:
    if isinstance(tree, Mapping):
        target.update(tree)
    elif isinstance(tree, (list, tuple)):
        target.update(enumerate(tree))


# ═══════════════════════════════════════════════════════════════════
#  MODULE-LEVEL VIEWS
# ═══════════════════════════════════════════════════════════════════

def detailed_partition(original: Any, updated: Any, settings: Optional[Settings] = None) -> Partition:
    return PartitionEngine(settings).detailed(original, updated)


def partition_added(original: Any, updated: Any, settings: Optional[Settings] = None) -> Any:
    return PartitionEngine(settings).added(original, updated)


def partition_deleted(original: Any, updated: Any, settings: Optional[Settings] = None) -> Any:
    return PartitionEngine(settings).deleted(original, updated)


def partition_updated(original: Any, updated: Any, settings: Optional[Settings] = None) -> Any:
    return PartitionEngine(settings).updated(original, updated)


def flatten(original: Any, updated: Any, settings: Optional[Settings] = None) -> dict:
    return PartitionEngine(settings).flatten(original, updated)
