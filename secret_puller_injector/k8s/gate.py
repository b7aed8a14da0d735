"""Annotation gate deciding whether a workload opted in to injection."""

from typing import Mapping, Optional

from secret_puller_injector.k8s.constants import INJECTOR_ANNOTATION, INJECTOR_ANNOTATION_VALUE


def should_inject(annotations: Optional[Mapping[str, str]]) -> bool:
    """Return True when the opt-in annotation is set to exactly "true".

    No boolean parsing: "True", "1" or "yes" do not opt in.

    Args:
        annotations: Pod (template) annotations, or None when absent

    Returns:
        True if the workload should receive the secret puller
    """
    if not annotations:
        return False
    return annotations.get(INJECTOR_ANNOTATION) == INJECTOR_ANNOTATION_VALUE
