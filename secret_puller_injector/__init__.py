"""
secret-puller-injector: admission-time secret puller injection

A mutating admission webhook that adds a secret-fetching init container and
its shared volumes to opted-in workloads, answering with a minimal JSON patch.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
