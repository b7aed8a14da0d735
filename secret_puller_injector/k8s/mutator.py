"""Mutation engine: apply the secret puller injection to a workload clone.

The original object is never touched. The mutator deep-copies it, resolves
the pod spec, consults the annotation gate and then only appends: one init
container, three volumes and one mount per application container.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict

from secret_puller_injector.core.config import InjectorConfig
from secret_puller_injector.core.errors import ConfigurationError, StructuralInvariantViolation
from secret_puller_injector.k8s.constants import INIT_CONTAINER_NAME, VAULT_ADDR_ENV
from secret_puller_injector.k8s.factory import build_injection_bundle
from secret_puller_injector.k8s.gate import should_inject
from secret_puller_injector.k8s.utils import WorkloadView, resolve_workload_view

logger = logging.getLogger(__name__)


@dataclass
class MutationResult:
    """Outcome of one mutation.

    Attributes:
        mutated: The clone, injected when ``changed`` is True, otherwise equal
                 to the original
        changed: Whether anything was injected
        reason: Short machine-friendly reason ("injected", "not-annotated",
                "already-injected")
    """
    mutated: Dict[str, Any]
    changed: bool
    reason: str


def _gate_applies(view: WorkloadView, config: InjectorConfig) -> bool:
    return view.is_template or config.gate_pods


def _already_injected(pod_spec: Dict[str, Any], kind: str) -> bool:
    init_containers = _list_field(pod_spec, "initContainers", kind)
    return any(c.get("name") == INIT_CONTAINER_NAME for c in init_containers if isinstance(c, dict))


def mutate(original: Dict[str, Any], config: InjectorConfig, kind: str) -> MutationResult:
    """Inject the secret puller into a clone of ``original``.

    Args:
        original: Pod or pod-template owner as decoded from the request
        config: Credential endpoint settings and gate policy
        kind: Resource kind of ``original``

    Returns:
        MutationResult with the clone and whether it changed

    Raises:
        ConfigurationError: If injection is requested but the address is blank
        StructuralInvariantViolation: If the pod spec cannot be resolved or
            its container lists are malformed
    """
    try:
        mutated = copy.deepcopy(original)
    except Exception as e:
        raise StructuralInvariantViolation(f"Failed to clone {kind} object", details=str(e)) from e

    view = resolve_workload_view(mutated, kind)

    if _gate_applies(view, config) and not should_inject(view.annotations):
        logger.debug(f"{kind} not annotated for injection, leaving unchanged")
        return MutationResult(mutated=mutated, changed=False, reason="not-annotated")

    if _already_injected(view.pod_spec, kind):
        logger.info(f"{kind} already has {INIT_CONTAINER_NAME}, leaving unchanged")
        return MutationResult(mutated=mutated, changed=False, reason="already-injected")

    if not config.vault_addr or not config.vault_addr.strip():
        raise ConfigurationError(f"{VAULT_ADDR_ENV} cannot be blank", key=VAULT_ADDR_ENV)

    bundle = build_injection_bundle(config)
    _apply_bundle(view.pod_spec, bundle.init_container, bundle.volumes, bundle.volume_mount, kind)

    logger.info(
        f"Injected {INIT_CONTAINER_NAME} into {kind} at /{'/'.join(view.spec_path)} "
        f"({len(view.pod_spec.get('containers') or [])} containers)"
    )
    return MutationResult(mutated=mutated, changed=True, reason="injected")


def _list_field(pod_spec: Dict[str, Any], name: str, kind: str) -> list:
    value = pod_spec.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise StructuralInvariantViolation(f"{kind} pod spec field '{name}' is not a list")
    return value


def _apply_bundle(pod_spec, init_container, volumes, volume_mount, kind) -> None:
    """Append bundle artifacts to ``pod_spec`` in place.

    All lists are validated before the first write, so a malformed spec raises
    without leaving a half-injected clone behind.
    """
    init_containers = _list_field(pod_spec, "initContainers", kind)
    existing_volumes = _list_field(pod_spec, "volumes", kind)
    containers = _list_field(pod_spec, "containers", kind)
    for index, container in enumerate(containers):
        if not isinstance(container, dict):
            raise StructuralInvariantViolation(f"{kind} container {index} is not an object")
        mounts = container.get("volumeMounts")
        if mounts is not None and not isinstance(mounts, list):
            raise StructuralInvariantViolation(
                f"{kind} container '{container.get('name')}' volumeMounts is not a list"
            )

    pod_spec["initContainers"] = init_containers + [copy.deepcopy(init_container)]
    pod_spec["volumes"] = existing_volumes + [copy.deepcopy(v) for v in volumes]

    # Rebuild by index so the stored container is the one that gets the mount
    mutated_containers = []
    for index in range(len(containers)):
        container = dict(containers[index])
        container["volumeMounts"] = list(container.get("volumeMounts") or []) + [dict(volume_mount)]
        mutated_containers.append(container)
    if "containers" in pod_spec:
        pod_spec["containers"] = mutated_containers
