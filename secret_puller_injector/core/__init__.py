"""
Core domain-agnostic components for the injector.

This package contains configuration loading, the exception hierarchy,
the patch schema and the structural diff used to build JSON patches.
"""

__all__ = []
