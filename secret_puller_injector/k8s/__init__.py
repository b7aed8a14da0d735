"""Kubernetes domain adapter for the injector.

This module provides the K8s-specific parts of the mutation pipeline:
- Injection factory: the secret puller init container, volumes and mount
- Annotation gate: opt-in check on pod template annotations
- Mutator: clone-and-append mutation of Pods and pod-template owners
"""
