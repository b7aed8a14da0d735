"""Shared utility functions for locating pod specs in K8s objects.

Pods carry their pod spec at the top level; Deployments and the other
template owners nest it under spec.template. Everything else in the injector
works on the common WorkloadView returned here.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from secret_puller_injector.core.errors import StructuralInvariantViolation
from secret_puller_injector.k8s.constants import POD_KIND, POD_TEMPLATE_KINDS


@dataclass
class WorkloadView:
    """Pod spec of a workload object plus the metadata the gate reads.

    Attributes:
        kind: Resource kind the view was resolved for
        annotations: Annotations of the pod (template) metadata, None if absent
        pod_spec: The pod spec dict, a live reference into the object
        spec_path: JSON pointer tokens locating ``pod_spec`` in the object
    """
    kind: str
    annotations: Optional[Mapping[str, str]]
    pod_spec: Dict[str, Any]
    spec_path: List[str]

    @property
    def is_template(self) -> bool:
        return self.kind in POD_TEMPLATE_KINDS


def resolve_workload_view(manifest: dict, kind: str) -> WorkloadView:
    """Resolve the pod spec and gate annotations of a workload object.

    Args:
        manifest: Pod or pod-template owner, as a dict
        kind: Resource kind, e.g. "Pod" or "Deployment"

    Returns:
        WorkloadView referencing the live pod spec inside ``manifest``

    Raises:
        StructuralInvariantViolation: If the kind is unsupported or the
            object has no pod spec where its kind requires one
    """
    if kind == POD_KIND:
        metadata = manifest.get("metadata")
        pod_spec = manifest.get("spec")
        spec_path = ["spec"]
    elif kind in POD_TEMPLATE_KINDS:
        template = (manifest.get("spec") or {}).get("template")
        if not isinstance(template, dict):
            raise StructuralInvariantViolation(f"{kind} has no spec.template")
        metadata = template.get("metadata")
        pod_spec = template.get("spec")
        spec_path = ["spec", "template", "spec"]
    else:
        raise StructuralInvariantViolation(f"Unsupported workload kind: {kind}")

    if not isinstance(pod_spec, dict):
        raise StructuralInvariantViolation(
            f"{kind} has no pod spec at /{'/'.join(spec_path)}"
        )

    annotations = metadata.get("annotations") if isinstance(metadata, dict) else None
    if annotations is not None and not isinstance(annotations, Mapping):
        raise StructuralInvariantViolation(f"{kind} annotations are not a mapping")

    return WorkloadView(
        kind=kind,
        annotations=annotations,
        pod_spec=pod_spec,
        spec_path=spec_path,
    )
