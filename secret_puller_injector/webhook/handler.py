"""Admission handler orchestrating decode, mutation, diff and response.

Request flow::

    Received -> Decoded -> {Gated-skip | Mutated} -> Diffed -> Responded
                   |                         |
                   +-------> Errored <-------+

Decode failures answer with code 400, configuration and invariant failures
with code 500. A request is never rejected on business grounds: every
successful path answers ``allowed: true`` with a possibly empty patch.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jsonpatch
from jsonpointer import JsonPointerException

from secret_puller_injector.core.config import InjectorConfig
from secret_puller_injector.core.diff import diff
from secret_puller_injector.core.errors import DecodeError, InjectorError, StructuralInvariantViolation
from secret_puller_injector.core.schema.patch_dsl import Patch
from secret_puller_injector.k8s.constants import POD_KIND, SUPPORTED_KINDS
from secret_puller_injector.k8s.mutator import mutate

logger = logging.getLogger(__name__)

ADMISSION_API_VERSIONS = ("admission.k8s.io/v1", "admission.k8s.io/v1beta1")
DEFAULT_API_VERSION = "admission.k8s.io/v1"
PATCH_TYPE = "JSONPatch"


@dataclass
class AdmissionRequest:
    """Decoded fields of an AdmissionReview request.

    Attributes:
        uid: Request uid, echoed in the response
        kind: Resource kind of ``obj``
        obj: The workload object
        api_version: AdmissionReview apiVersion to answer with
        namespace: Request namespace, for logging
        operation: Admission operation (CREATE, UPDATE, ...), for logging
    """
    uid: Optional[str]
    kind: str
    obj: Dict[str, Any]
    api_version: str = DEFAULT_API_VERSION
    namespace: Optional[str] = None
    operation: Optional[str] = None


def decode_admission_review(body: Any) -> AdmissionRequest:
    """Decode an AdmissionReview body into an AdmissionRequest.

    Args:
        body: Parsed JSON body

    Returns:
        AdmissionRequest

    Raises:
        DecodeError: If the body does not have the AdmissionReview shape
    """
    if not isinstance(body, dict):
        raise DecodeError("AdmissionReview body must be a JSON object")

    req = body.get("request")
    if not isinstance(req, dict):
        raise DecodeError("AdmissionReview has no request", field="request")

    obj = req.get("object")
    if not isinstance(obj, dict):
        raise DecodeError("AdmissionReview request has no object", field="request.object")

    kind_info = req.get("kind")
    kind = kind_info.get("kind") if isinstance(kind_info, dict) else None
    kind = kind or obj.get("kind")
    if not isinstance(kind, str) or not kind:
        raise DecodeError("AdmissionReview request has no resource kind", field="request.kind.kind")

    if obj.get("kind") not in (None, kind):
        raise DecodeError(
            f"Object kind {obj.get('kind')!r} does not match request kind {kind!r}",
            field="request.object.kind",
        )

    api_version = body.get("apiVersion")
    if api_version not in ADMISSION_API_VERSIONS:
        api_version = DEFAULT_API_VERSION

    return AdmissionRequest(
        uid=req.get("uid"),
        kind=kind,
        obj=obj,
        api_version=api_version,
        namespace=req.get("namespace"),
        operation=req.get("operation"),
    )


def _require_pod_spec(request: AdmissionRequest) -> None:
    spec = request.obj.get("spec")
    if request.kind != POD_KIND and isinstance(spec, dict):
        template = spec.get("template")
        spec = template.get("spec") if isinstance(template, dict) else None
    if not isinstance(spec, dict):
        raise DecodeError(f"{request.kind} object has no pod spec", field="request.object.spec")


def build_patch(original: Dict[str, Any], config: InjectorConfig, kind: str) -> Patch:
    """Mutate a clone of ``original`` and diff it against the original.

    The generated patch is applied back onto the original with jsonpatch and
    must reproduce the mutated object exactly.

    Args:
        original: Workload object from the request (not modified)
        config: Injector configuration
        kind: Resource kind

    Returns:
        Patch, empty when nothing was injected

    Raises:
        ConfigurationError: Propagated from the mutator
        StructuralInvariantViolation: If the patch does not round-trip
    """
    result = mutate(original, config, kind)
    patch = diff(original, result.mutated)

    if not result.changed:
        if patch:
            raise StructuralInvariantViolation(
                "Unchanged mutation produced a non-empty patch", details=patch.to_serializable()
            )
        return patch

    try:
        patched = jsonpatch.JsonPatch(patch.to_serializable()).apply(original)
    except (jsonpatch.JsonPatchException, JsonPointerException) as e:
        raise StructuralInvariantViolation("Generated patch does not apply", details=str(e)) from e
    if patched != result.mutated:
        raise StructuralInvariantViolation("Generated patch does not reproduce the mutated object")
    return patch


def _response(api_version: str, response: Dict[str, Any]) -> Dict[str, Any]:
    return {"apiVersion": api_version, "kind": "AdmissionReview", "response": response}


def error_response(
    uid: Optional[str], error: InjectorError, api_version: str = DEFAULT_API_VERSION
) -> Dict[str, Any]:
    """Build a rejecting AdmissionReview response for ``error``."""
    return _response(api_version, {
        "uid": uid,
        "allowed": False,
        "status": {"code": error.status_code, "message": error.message},
    })


def patch_response(
    uid: Optional[str], patch: Patch, api_version: str = DEFAULT_API_VERSION
) -> Dict[str, Any]:
    """Build an allowing AdmissionReview response, with the patch when non-empty."""
    response: Dict[str, Any] = {"uid": uid, "allowed": True}
    if patch:
        response["patchType"] = PATCH_TYPE
        response["patch"] = base64.b64encode(patch.to_json().encode("utf-8")).decode("utf-8")
    return _response(api_version, response)


def handle_admission_review(body: Any, config: InjectorConfig) -> Dict[str, Any]:
    """Handle one AdmissionReview request end to end.

    Args:
        body: Parsed JSON AdmissionReview
        config: Injector configuration built at startup

    Returns:
        AdmissionReview response dict, ready to be serialized
    """
    uid = None
    if isinstance(body, dict) and isinstance(body.get("request"), dict):
        uid = body["request"].get("uid")

    try:
        request = decode_admission_review(body)
    except DecodeError as e:
        logger.warning(f"Rejecting undecodable request uid={uid}: {e.message}")
        return error_response(uid, e)

    if request.kind not in SUPPORTED_KINDS:
        logger.info(f"Admitting uid={request.uid} kind={request.kind}: kind not handled")
        return patch_response(request.uid, Patch(), request.api_version)

    try:
        _require_pod_spec(request)
        patch = build_patch(request.obj, config, request.kind)
    except DecodeError as e:
        logger.warning(f"Rejecting undecodable request uid={request.uid}: {e.message}")
        return error_response(request.uid, e, request.api_version)
    except InjectorError as e:
        logger.error(f"Mutation failed uid={request.uid} kind={request.kind}: {e.message}")
        return error_response(request.uid, e, request.api_version)

    metadata = request.obj.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    logger.info(
        f"Admitting uid={request.uid} kind={request.kind} op={request.operation} "
        f"ns={request.namespace or metadata.get('namespace')} "
        f"name={metadata.get('name') or metadata.get('generateName')} patches={len(patch)}"
    )
    return patch_response(request.uid, patch, request.api_version)
