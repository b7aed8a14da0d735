"""Offline injection into YAML manifests.

Runs the same mutation engine the webhook uses over multi-document YAML
streams, using ruamel.yaml so untouched parts of the manifests keep their
formatting and comments.
"""

import logging
from typing import IO, Any, List

from ruamel.yaml import YAML

from secret_puller_injector.core.config import InjectorConfig
from secret_puller_injector.k8s.constants import SUPPORTED_KINDS
from secret_puller_injector.k8s.mutator import mutate

logger = logging.getLogger(__name__)


def _create_yaml_instance() -> YAML:
    """Create configured ruamel.yaml instance for K8s manifest editing.

    Returns:
        YAML instance configured to:
        - Preserve quotes and formatting
        - Not wrap long strings (prevents image field splitting)
        - Use block style (not flow style)
    """
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 4096  # Very wide to prevent wrapping long strings like ECR paths
    yaml.default_flow_style = False
    yaml.allow_unicode = True
    return yaml


def load_manifests(stream: IO[str]) -> List[Any]:
    """Load all YAML documents from ``stream``, skipping empty ones."""
    yaml = _create_yaml_instance()
    return [doc for doc in yaml.load_all(stream) if doc is not None]


def dump_manifests(documents: List[Any], stream: IO[str]) -> None:
    """Write ``documents`` to ``stream`` as a multi-document YAML stream."""
    yaml = _create_yaml_instance()
    yaml.dump_all(documents, stream)


def inject_manifests(documents: List[Any], config: InjectorConfig) -> List[Any]:
    """Inject the secret puller into every supported, opted-in document.

    Args:
        documents: Parsed manifests (any kinds)
        config: Injector configuration

    Returns:
        New list of documents; injected ones are mutated copies, the rest are
        returned as-is

    Raises:
        ConfigurationError: If a document opts in but no address is configured
        StructuralInvariantViolation: If an opted-in document is malformed
    """
    result = []
    for doc in documents:
        kind = doc.get("kind") if isinstance(doc, dict) else None
        if kind not in SUPPORTED_KINDS:
            result.append(doc)
            continue

        outcome = mutate(doc, config, kind)
        name = (doc.get("metadata") or {}).get("name")
        logger.info(f"{kind}/{name}: {outcome.reason}")
        result.append(outcome.mutated)
    return result
