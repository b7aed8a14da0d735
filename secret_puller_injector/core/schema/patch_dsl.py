"""Patch model for JSON patches sent back to the API server.

This module defines the patch data structures produced by the structural diff
and serialized into admission responses.

JSON Transport Format
---------------------

Patches are serialized as RFC 6902 JSON Patch documents:

Example::

    [
      {"op": "add", "path": "/spec/template/spec/initContainers", "value": [...]},
      {"op": "add", "path": "/spec/template/spec/containers/0/volumeMounts/1",
       "value": {"name": "secrets", "mountPath": "/secrets"}}
    ]

Only ``add``, ``replace`` and ``remove`` are ever produced.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

ADD = "add"
REPLACE = "replace"
REMOVE = "remove"

OPERATIONS = (ADD, REPLACE, REMOVE)


@dataclass
class PatchOp:
    """Single JSON patch operation.

    Attributes:
        op: Operation name, one of "add", "replace" or "remove"
        path: RFC 6901 JSON pointer to the target location
        value: Payload for "add" and "replace"; ignored for "remove"
    """

    op: str
    path: str
    value: Any = None

    def __post_init__(self) -> None:
        if self.op not in OPERATIONS:
            raise ValueError(f"Unsupported patch operation: {self.op}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the RFC 6902 wire form."""
        if self.op == REMOVE:
            return {"op": self.op, "path": self.path}
        return {"op": self.op, "path": self.path, "value": self.value}


@dataclass
class Patch:
    """Ordered sequence of patch operations.

    Attributes:
        ops: Operations to apply sequentially
    """

    ops: List[PatchOp] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.ops)

    def __bool__(self) -> bool:
        return bool(self.ops)

    def operations(self) -> List[str]:
        """Operation names in order, e.g. ``["add", "add"]``."""
        return [op.op for op in self.ops]

    def to_serializable(self) -> List[Dict[str, Any]]:
        """Convert patch to a JSON-serializable list of operation dicts."""
        return [op.to_dict() for op in self.ops]

    def to_json(self) -> str:
        """Serialize to a compact JSON Patch document."""
        return json.dumps(self.to_serializable(), separators=(",", ":"))
