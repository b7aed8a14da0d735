"""Injection factory for the secret puller init container.

Builds the three artifacts the mutator attaches to a pod spec: the init
container, its volumes and the shared mount for application containers.
The factory only assembles constants and the given config; it never reads
the environment and never validates the address.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from secret_puller_injector.core.config import InjectorConfig
from secret_puller_injector.k8s.constants import (
    IMAGE_PULL_POLICY,
    INIT_CONTAINER_CPU,
    INIT_CONTAINER_MEMORY,
    INIT_CONTAINER_NAME,
    SECRET_KEYS_MOUNT_PATH,
    SECRET_KEYS_VOLUME_NAME,
    SECRET_MOUNT_PATH,
    SECRET_PULLER_IMAGE,
    SECRET_VOLUME_NAME,
    VAULT_ADDR_ENV,
    VAULT_AUTH_MOUNT_PATH,
    VAULT_AUTH_SECRET_NAME,
    VAULT_AUTH_VOLUME_NAME,
    VAULT_SSL_VERIFY_ENV,
)


@dataclass(frozen=True)
class InjectionBundle:
    """Everything injected into one pod spec.

    Attributes:
        init_container: Container dict for the secret puller
        volumes: Scratch, vault-auth and secret-keys volume dicts, in that order
        volume_mount: Mount of the scratch volume, added to every app container
    """
    init_container: Dict[str, Any]
    volumes: Tuple[Dict[str, Any], ...]
    volume_mount: Dict[str, Any]


def secret_volume_mount() -> Dict[str, Any]:
    """Mount of the in-memory scratch volume at /secrets."""
    return {"name": SECRET_VOLUME_NAME, "mountPath": SECRET_MOUNT_PATH}


def secret_puller_container(config: InjectorConfig) -> Dict[str, Any]:
    """Build the secret puller init container.

    Args:
        config: Supplies VAULT_ADDR and VAULT_SSL_VERIFY

    Returns:
        Container dict in Kubernetes API shape
    """
    return {
        "name": INIT_CONTAINER_NAME,
        "image": SECRET_PULLER_IMAGE,
        "imagePullPolicy": IMAGE_PULL_POLICY,
        "env": [
            {"name": VAULT_ADDR_ENV, "value": config.vault_addr},
            {"name": VAULT_SSL_VERIFY_ENV, "value": "true" if config.vault_verify_tls else "false"},
        ],
        "volumeMounts": [
            secret_volume_mount(),
            {"name": VAULT_AUTH_VOLUME_NAME, "mountPath": VAULT_AUTH_MOUNT_PATH},
            {"name": SECRET_KEYS_VOLUME_NAME, "mountPath": SECRET_KEYS_MOUNT_PATH},
        ],
        "resources": {
            "limits": {
                "cpu": INIT_CONTAINER_CPU,
                "memory": INIT_CONTAINER_MEMORY,
            }
        },
    }


def secret_puller_volumes() -> Tuple[Dict[str, Any], ...]:
    """Build the volumes the init container and app containers share.

    Returns:
        Tuple of volume dicts:
        - secrets: memory-backed emptyDir the puller writes into
        - vault-auth: the pre-provisioned ``vaultauth`` secret
        - secret-keys: downward API projection of the pod's annotations
    """
    return (
        {
            "name": SECRET_VOLUME_NAME,
            "emptyDir": {"medium": "Memory"},
        },
        {
            "name": VAULT_AUTH_VOLUME_NAME,
            "secret": {"secretName": VAULT_AUTH_SECRET_NAME},
        },
        {
            "name": SECRET_KEYS_VOLUME_NAME,
            "downwardAPI": {
                "items": [
                    {"path": "annotations", "fieldRef": {"fieldPath": "metadata.annotations"}},
                ]
            },
        },
    )


def build_injection_bundle(config: InjectorConfig) -> InjectionBundle:
    """Build a fresh InjectionBundle for one request.

    Equal configs always produce equal bundles. Each call returns new dicts,
    so callers may embed them in a manifest without sharing state.

    Args:
        config: Credential endpoint settings

    Returns:
        InjectionBundle

    Example:
        >>> bundle = build_injection_bundle(InjectorConfig(vault_addr="https://vault:8200"))
        >>> bundle.init_container["name"]
        'samson-secret-puller'
        >>> [v["name"] for v in bundle.volumes]
        ['secrets', 'vault-auth', 'secret-keys']
    """
    return InjectionBundle(
        init_container=secret_puller_container(config),
        volumes=secret_puller_volumes(),
        volume_mount=secret_volume_mount(),
    )
