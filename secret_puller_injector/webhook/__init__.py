"""Admission webhook surface: AdmissionReview handling and the Flask app."""

from secret_puller_injector.webhook.handler import handle_admission_review

__all__ = ["handle_admission_review"]
