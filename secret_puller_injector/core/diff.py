"""Structural diff between two JSON-like documents.

The mutator edits a deep clone of the admission object; this module compares
the original with the clone and emits the JSON patch that turns one into the
other. Output is deterministic for a given pair of inputs: dict keys are
visited in sorted order and list indices in application order.
"""

import logging
from typing import Any, List

from jsonpointer import JsonPointer

from secret_puller_injector.core.schema.patch_dsl import ADD, REMOVE, REPLACE, Patch, PatchOp

logger = logging.getLogger(__name__)


def diff(original: Any, mutated: Any) -> Patch:
    """Compute the JSON patch transforming ``original`` into ``mutated``.

    Args:
        original: Source document (dicts, lists and scalars)
        mutated: Target document

    Returns:
        Patch whose operations, applied in order to ``original``, yield ``mutated``.
        Empty when the documents are equal.

    Example:
        >>> diff({"a": [1]}, {"a": [1, 2]}).to_serializable()
        [{'op': 'add', 'path': '/a/1', 'value': 2}]
    """
    ops: List[PatchOp] = []
    _compare(original, mutated, [], ops)
    logger.debug(f"Diff produced {len(ops)} operations")
    return Patch(ops=ops)


def _pointer(parts: List[Any]) -> str:
    return JsonPointer.from_parts(parts).path


def _same_kind(a: Any, b: Any) -> bool:
    # bool is an int subclass, but true != 1 in JSON
    return type(a) is type(b) or (
        isinstance(a, (int, float)) and isinstance(b, (int, float))
        and not isinstance(a, bool) and not isinstance(b, bool)
    )


def _compare(src: Any, dst: Any, parts: List[Any], ops: List[PatchOp]) -> None:
    if isinstance(src, dict) and isinstance(dst, dict):
        _compare_dicts(src, dst, parts, ops)
    elif isinstance(src, list) and isinstance(dst, list):
        _compare_lists(src, dst, parts, ops)
    elif not _same_kind(src, dst) or src != dst:
        ops.append(PatchOp(REPLACE, _pointer(parts), dst))


def _compare_dicts(src: dict, dst: dict, parts: List[Any], ops: List[PatchOp]) -> None:
    for key in sorted(src.keys() - dst.keys(), key=str):
        ops.append(PatchOp(REMOVE, _pointer(parts + [key])))

    for key in sorted(src.keys() | dst.keys(), key=str):
        if key not in src or (src[key] is None and dst.get(key) is not None):
            # add also overwrites an existing member, so null to value stays add-only
            ops.append(PatchOp(ADD, _pointer(parts + [key]), dst[key]))
        elif key in dst:
            _compare(src[key], dst[key], parts + [key], ops)


def _compare_lists(src: list, dst: list, parts: List[Any], ops: List[PatchOp]) -> None:
    common = min(len(src), len(dst))

    for index in range(common):
        _compare(src[index], dst[index], parts + [index], ops)

    for index in range(common, len(dst)):
        ops.append(PatchOp(ADD, _pointer(parts + [index]), dst[index]))

    # Highest index first so earlier removals don't shift later targets
    for index in range(len(src) - 1, common - 1, -1):
        ops.append(PatchOp(REMOVE, _pointer(parts + [index])))
