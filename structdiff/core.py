"""
structdiff.core — Three-Way Structural Partition
=================================================

FRAMEWORK
═════════

§1  THE PROBLEM
───────────────

Two snapshots of the same nested dataset (records of records, lists of
records, plain scalars) differ in ways a reviewer wants to see at a
glance: which entries are new, which are gone, and which changed.  A
flat edit script answers "how to get from A to B"; a PARTITION answers
"what kind of change happened where", which is what release notes and
version-bump decisions are made from.


§2  VALUE KINDS
───────────────

Every node of an input tree has exactly one kind:

    None           → NULL
    bool           → BOOLEAN     (checked before NUMBER: bool ⊂ int)
    int / float    → NUMBER
    str            → STRING
    Mapping        → RECORD      (string keys; key order is irrelevant)
    list / tuple   → SEQUENCE    (position is the comparison key)

Anything else, including a record key that is not a string, is
rejected with UnsupportedValueError, whether it sits in a compared,
added or deleted sub-tree.  Two values of different kinds are never
aligned against each other; `True` and `1` are different kinds and so
never compare equal.


§3  THE PARTITION
─────────────────

    Partition(added, deleted, updated)

    added[k]    = value present only in the updated tree (reported whole)
    deleted[k]  = REMOVED, for keys/indices present only in the original
    updated[k]  = Replacement(value)   scalar change or kind change
                | Partition(...)       both sides are records; descend

At one level the three key sets are pairwise disjoint.  A key absent
from all three is identical on both sides, by reference or by
exhaustive structural comparison.

At the root, when the inputs are not both records, `updated` is itself
a Replacement carrying the whole updated value.


§4  COMPARISON RULES
────────────────────

VALUE COMPARATOR
    kinds differ            → Replacement(updated)
    both SEQUENCE           → sequence comparator
    both RECORD             → record comparator
    same scalar kind        → Replacement(updated)

SEQUENCE COMPARATOR (positional, single pass, no LCS)
    i ≥ len(original)       → added[i]
    i ≥ len(updated)        → deleted[i]
    both RECORD, differ     → updated[i] = nested Partition
    otherwise, differ       → updated[i] = Replacement
                              (nested sequences are replaced wholesale)

    An insertion at the front therefore shows as an update at every
    following index plus one trailing addition.

RECORD COMPARATOR
    union of keys; new keys are added whole, missing keys are deleted,
    shared keys that differ recurse through the value comparator.
    A Replacement child is hoisted directly into updated[key]; a
    non-empty nested Partition is stored under updated[key].


§5  COMPLEXITY AND SAFETY
─────────────────────────

O(total size) for trees without shared structure.  Recursion depth is
bounded by `max_depth`; with `detect_cycles` on, re-entering the same
(original node, updated node) pair on the active path raises
CyclicInputError instead of recursing forever.  Running out of
interpreter stack before `max_depth` is reached is reported as
DepthLimitError too, never as a bare RecursionError.

Inputs are never mutated.  With `copy_values` on, every value placed in
a partition is a fresh copy, so a partition never aliases its inputs.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Optional, Union


DEFAULT_MAX_DEPTH = 100

KeyPath = tuple[Union[str, int], ...]


def format_path(path: KeyPath) -> str:
    return "/".join(str(p) for p in path) or "(root)"


# ═══════════════════════════════════════════════════════════════════
#  ERRORS
# ═══════════════════════════════════════════════════════════════════

class PartitionError(Exception):
    """Base class for every error raised while partitioning two trees."""


class UnsupportedValueError(PartitionError, TypeError):
    """A node is not a scalar, record or sequence."""

    def __init__(self, value: Any, path: KeyPath = (), message: Optional[str] = None):
        self.value = value
        self.path = path
        super().__init__(
            message or f"unsupported value kind {type(value).__name__!r} at {format_path(path)}"
        )


class CyclicInputError(PartitionError, ValueError):
    """A container was reached again through itself."""

    def __init__(self, path: KeyPath = ()):
        self.path = path
        super().__init__(f"cyclic input detected at {format_path(path)}")


class DepthLimitError(PartitionError, RecursionError):
    """Nesting went deeper than the configured limit."""

    def __init__(self, path: KeyPath, limit: int, message: Optional[str] = None):
        self.path = path
        self.limit = limit
        super().__init__(
            message or f"nesting depth {len(path)} exceeds limit {limit} at {format_path(path)}"
        )


# ═══════════════════════════════════════════════════════════════════
#  DATA MODEL
# ═══════════════════════════════════════════════════════════════════

class Kind(Enum):
    """Structural kind of a value."""
    NULL = auto()
    BOOLEAN = auto()
    NUMBER = auto()
    STRING = auto()
    RECORD = auto()
    SEQUENCE = auto()


SCALAR_KINDS = frozenset({Kind.NULL, Kind.BOOLEAN, Kind.NUMBER, Kind.STRING})


def kind_of(value: Any, path: KeyPath = ()) -> Kind:
    """Classify a value, raising UnsupportedValueError for anything exotic."""
    if value is None:
        return Kind.NULL
    if isinstance(value, bool):  # Must check before int (bool is subclass of int)
        return Kind.BOOLEAN
    if isinstance(value, (int, float)):
        return Kind.NUMBER
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, Mapping):
        return Kind.RECORD
    if isinstance(value, (list, tuple)):
        return Kind.SEQUENCE
    raise UnsupportedValueError(value, path)


def check_key(key: Any, path: KeyPath = ()) -> None:
    """Record keys must be strings; `path` is the path of the record."""
    if not isinstance(key, str):
        raise UnsupportedValueError(
            key, path,
            f"record key {key!r} ({type(key).__name__}) is not a string at {format_path(path)}",
        )


class _RemovedType:
    """Type of the REMOVED singleton."""
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "REMOVED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return "REMOVED"


#: Marks a key or index that no longer exists.  Distinct from None,
#: which is a legitimate NULL value.
REMOVED = _RemovedType()


@dataclass(frozen=True, slots=True)
class Replacement:
    """The whole updated value, standing in for a change that is not diffed further."""
    value: Any

    def __repr__(self) -> str:
        return f"Replacement({self.value!r})"


class Category(str, Enum):
    ADDED = "added"
    DELETED = "deleted"
    UPDATED = "updated"


@dataclass(frozen=True, slots=True)
class Partition:
    """
    Added / deleted / updated classification of the differences
    between two trees at one level.

    `updated` maps each changed key to a Replacement or a nested
    Partition.  For a root whose inputs are not both records it is a
    single Replacement instead of a mapping.
    """
    added: dict = field(default_factory=dict)
    deleted: dict = field(default_factory=dict)
    updated: Union[dict, Replacement] = field(default_factory=dict)

    @property
    def is_replacement(self) -> bool:
        return isinstance(self.updated, Replacement)

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.deleted and not self.is_replacement and not self.updated

    def __bool__(self) -> bool:
        return not self.is_empty

    def project(self, category: Union[Category, str]) -> Any:
        """
        Merge one category of this partition and all nested partitions
        into a single plain tree.

            {"a": Partition(updated={"x": Replacement(2)})}  →  {"a": {"x": 2}}

        A key can show up in several projections when its nested
        partition has entries in several categories.
        """
        category = Category(category)
        if self.is_replacement:
            return self.updated.value if category is Category.UPDATED else {}

        tree: dict = {}
        if category is Category.ADDED:
            tree.update(self.added)
        elif category is Category.DELETED:
            tree.update(self.deleted)

        for key, entry in self.updated.items():
            if isinstance(entry, Replacement):
                if category is Category.UPDATED:
                    tree[key] = entry.value
                continue
            sub_tree = entry.project(category)
            if sub_tree:
                tree[key] = sub_tree
        return tree

    def to_dict(self) -> dict:
        """Nested plain form: every nested Partition becomes its own three-key dict."""
        if self.is_replacement:
            updated = self.updated.value
        else:
            updated = {
                key: entry.value if isinstance(entry, Replacement) else entry.to_dict()
                for key, entry in self.updated.items()
            }
        return {
            "added": dict(self.added),
            "deleted": dict(self.deleted),
            "updated": updated,
        }


# ═══════════════════════════════════════════════════════════════════
#  COMPARATORS
# ═══════════════════════════════════════════════════════════════════

class Comparator:
    """
    Value, sequence and record comparators sharing one set of guards.

    A Comparator carries the identity set of the active comparison path,
    so use one instance per top-level comparison.
    """

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        detect_cycles: bool = True,
        copy_values: bool = True,
    ):
        self.max_depth = max_depth
        self.detect_cycles = detect_cycles
        self.copy_values = copy_values
        self._active: set[tuple[int, int]] = set()
        self._walking: set[int] = set()
        self._deepest: KeyPath = ()

    # ── guards ────────────────────────────────────────────────────

    def _check_depth(self, path: KeyPath) -> None:
        if len(path) > self.max_depth:
            raise DepthLimitError(path, self.max_depth)
        if len(path) > len(self._deepest):
            self._deepest = path

    def run(self, method: Callable, *args) -> Any:
        """
        Run `method` as one top-level comparison on this comparator.

        The interpreter stack can run out before `max_depth` does; that
        is reported as DepthLimitError at the deepest path reached.
        """
        self._deepest = ()
        try:
            return method(*args)
        except DepthLimitError:
            raise
        except RecursionError as exc:
            raise DepthLimitError(
                self._deepest, self.max_depth,
                f"interpreter stack exhausted at nesting depth {len(self._deepest)} "
                f"(limit {self.max_depth}) at {format_path(self._deepest)}",
            ) from exc

    def _descend(self, handler: Callable, original: Any, updated: Any, path: KeyPath) -> Any:
        self._check_depth(path)
        if not self.detect_cycles:
            return handler(original, updated, path)

        pair = (id(original), id(updated))
        if pair in self._active:
            raise CyclicInputError(path)
        self._active.add(pair)
        try:
            return handler(original, updated, path)
        finally:
            self._active.discard(pair)

    # ── equality ──────────────────────────────────────────────────

    def identical(self, original: Any, updated: Any, path: KeyPath = ()) -> bool:
        """Same object, or equal scalars of the same kind."""
        if original is updated:
            return True
        kind = kind_of(original, path)
        return (
            kind in SCALAR_KINDS
            and kind is kind_of(updated, path)
            and original == updated
        )

    def equal(self, original: Any, updated: Any, path: KeyPath = ()) -> bool:
        """Kind-aware deep structural equality."""
        if self.identical(original, updated, path):
            return True
        kind = kind_of(original, path)
        if kind in SCALAR_KINDS or kind is not kind_of(updated, path):
            return False
        if len(original) != len(updated):
            return False
        return self._descend(self._equal_containers, original, updated, path)

    def _equal_containers(self, original: Any, updated: Any, path: KeyPath) -> bool:
        if kind_of(original, path) is Kind.RECORD:
            for key in (*original, *updated):
                check_key(key, path)
            if original.keys() != updated.keys():
                return False
            return all(
                self.equal(original[key], updated[key], path + (key,))
                for key in original
            )
        return all(
            self.equal(old, new, path + (index,))
            for index, (old, new) in enumerate(zip(original, updated))
        )

    # ── values placed into a partition ────────────────────────────

    def detach(self, value: Any, path: KeyPath = ()) -> Any:
        """
        Validate every node of `value` and, when copying is on, return
        an independent copy (records become dicts).
        """
        return self._walk(value, path, self.copy_values)

    def validate(self, value: Any, path: KeyPath = ()) -> None:
        """Validate every node of `value` without copying anything."""
        self._walk(value, path, False)

    def _walk(self, value: Any, path: KeyPath, copy: bool) -> Any:
        kind = kind_of(value, path)
        if kind in SCALAR_KINDS:
            return value
        self._check_depth(path)

        marker = id(value)
        if self.detect_cycles and marker in self._walking:
            raise CyclicInputError(path)
        self._walking.add(marker)
        try:
            if kind is Kind.RECORD:
                copied = {}
                for key, item in value.items():
                    check_key(key, path)
                    copied[key] = self._walk(item, path + (key,), copy)
            else:
                copied = [
                    self._walk(item, path + (index,), copy)
                    for index, item in enumerate(value)
                ]
                if isinstance(value, tuple):
                    copied = tuple(copied)
        finally:
            self._walking.discard(marker)

        return copied if copy else value

    def replace(self, value: Any, path: KeyPath = ()) -> Replacement:
        return Replacement(self.detach(value, path))

    def supersede(self, original: Any, updated: Any, path: KeyPath = ()) -> Replacement:
        """Replace `original` wholesale, still validating what it held."""
        self.validate(original, path)
        return self.replace(updated, path)

    # ── value comparator ──────────────────────────────────────────

    def compare(self, original: Any, updated: Any, path: KeyPath = ()) -> Union[Partition, Replacement]:
        """
        Dispatch on structural kind.  Callers are expected to have ruled
        out `identical(original, updated)` already: two equal scalars
        still come back as a Replacement.
        """
        original_kind = kind_of(original, path)
        updated_kind = kind_of(updated, path)

        if original_kind is not updated_kind:
            return self.supersede(original, updated, path)
        if original_kind is Kind.SEQUENCE:
            return self._descend(self.compare_sequences, original, updated, path)
        if original_kind is Kind.RECORD:
            return self._descend(self.compare_records, original, updated, path)

        # Same scalar kind: scalars are never partially diffed
        return self.replace(updated, path)

    # ── sequence comparator ───────────────────────────────────────

    def compare_sequences(self, original: Any, updated: Any, path: KeyPath = ()) -> Partition:
        added: dict = {}
        deleted: dict = {}
        changed: dict = {}

        for index in range(max(len(original), len(updated))):
            where = path + (index,)
            if index >= len(original):
                added[index] = self.detach(updated[index], where)
            elif index >= len(updated):
                self.validate(original[index], where)
                deleted[index] = REMOVED
            else:
                old, new = original[index], updated[index]
                if self.identical(old, new, where):
                    continue
                if kind_of(old, where) is Kind.RECORD and kind_of(new, where) is Kind.RECORD:
                    child = self.compare(old, new, where)
                    if child:
                        changed[index] = child
                elif not self.equal(old, new, where):
                    # Nested sequences are replaced wholesale, never index-diffed
                    changed[index] = self.supersede(old, new, where)

        # Additions only
        if not changed and not deleted:
            return Partition(added=added)
        return Partition(added=added, deleted=deleted, updated=changed)

    # ── record comparator ─────────────────────────────────────────

    def compare_records(self, original: Mapping, updated: Mapping, path: KeyPath = ()) -> Partition:
        added: dict = {}
        deleted: dict = {}
        changed: dict = {}

        keys = list(original)
        keys.extend(key for key in updated if key not in original)

        for key in keys:
            check_key(key, path)
            where = path + (key,)
            if key not in original:
                added[key] = self.detach(updated[key], where)
            elif key not in updated:
                self.validate(original[key], where)
                deleted[key] = REMOVED
            else:
                old, new = original[key], updated[key]
                if self.identical(old, new, where):
                    continue
                child = self.compare(old, new, where)
                # An empty nested partition means the two containers are equal
                if isinstance(child, Replacement) or not child.is_empty:
                    changed[key] = child

        return Partition(added=added, deleted=deleted, updated=changed)


def compare(original: Any, updated: Any, **options) -> Union[Partition, Replacement]:
    """Compare two values of any kind.  `options` go to Comparator."""
    comparator = Comparator(**options)
    return comparator.run(comparator.compare, original, updated)


def compare_sequences(original: Any, updated: Any, **options) -> Partition:
    """Index-aligned partition of two sequences."""
    if kind_of(original) is not Kind.SEQUENCE or kind_of(updated) is not Kind.SEQUENCE:
        raise TypeError(
            f"expected two sequences, got {type(original).__name__} and {type(updated).__name__}"
        )
    comparator = Comparator(**options)
    return comparator.run(comparator._descend, comparator.compare_sequences, original, updated, ())


def compare_records(original: Any, updated: Any, **options) -> Partition:
    """Key-union partition of two records."""
    if kind_of(original) is not Kind.RECORD or kind_of(updated) is not Kind.RECORD:
        raise TypeError(
            f"expected two records, got {type(original).__name__} and {type(updated).__name__}"
        )
    comparator = Comparator(**options)
    return comparator.run(comparator._descend, comparator.compare_records, original, updated, ())


def values_equal(original: Any, updated: Any, **options) -> bool:
    """Kind-aware deep equality: `True` never equals `1`."""
    comparator = Comparator(**options)
    return comparator.run(comparator.equal, original, updated)


# ═══════════════════════════════════════════════════════════════════
#  APPLY (partition → updated tree)
# ═══════════════════════════════════════════════════════════════════

def apply_partition(original: Any, partition: Partition) -> Any:
    """
    Rebuild the updated tree from `original` and its partition.

        apply_partition(a, detailed_partition(a, b)) == b

    `original` is not modified; unchanged sub-trees are shared with it.
    """
    if partition.is_replacement:
        return partition.updated.value
    if partition.is_empty:
        return original

    kind = kind_of(original)
    if kind is Kind.RECORD:
        return _apply_record(original, partition)
    if kind is Kind.SEQUENCE:
        return _apply_sequence(original, partition)
    raise TypeError(f"cannot apply a nested partition to a {kind.name.lower()} value")


def _apply_entry(value: Any, entry: Union[Partition, Replacement]) -> Any:
    if isinstance(entry, Replacement):
        return entry.value
    return apply_partition(value, entry)


def _apply_record(original: Mapping, partition: Partition) -> dict:
    result = dict(original)
    for key in partition.deleted:
        result.pop(key, None)
    for key, entry in partition.updated.items():
        result[key] = _apply_entry(original[key], entry)
    result.update(partition.added)
    return result


def _apply_sequence(original: Any, partition: Partition) -> Any:
    items = list(original)
    for index, entry in partition.updated.items():
        items[index] = _apply_entry(original[index], entry)

    # Deletions only ever trail the updated sequence
    if partition.deleted:
        del items[min(partition.deleted):]
    items.extend(partition.added[index] for index in sorted(partition.added))

    if isinstance(original, tuple):
        return tuple(items)
    return items
