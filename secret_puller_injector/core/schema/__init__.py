"""
Core schema definitions for JSON patches.

These dataclasses are the output format of the structural diff and the
payload of admission responses.
"""

from secret_puller_injector.core.schema.patch_dsl import ADD, REMOVE, REPLACE, Patch, PatchOp

__all__ = [
    "ADD",
    "REMOVE",
    "REPLACE",
    "Patch",
    "PatchOp",
]
