"""Flask transport for the mutating admission webhook.

Routes:
- POST /mutate: AdmissionReview in, AdmissionReview out (always HTTP 200
  once the body is JSON; rejections travel inside the envelope)
- GET /healthz: liveness/readiness probe
"""

import logging
from typing import Optional

from flask import Flask, jsonify, request

from secret_puller_injector.core.config import InjectorConfig, load_injector_config
from secret_puller_injector.webhook.handler import handle_admission_review

logger = logging.getLogger(__name__)


def create_app(config: Optional[InjectorConfig] = None) -> Flask:
    """Create the webhook Flask app.

    Args:
        config: Injector configuration; loaded from config.json and the
                environment when omitted

    Returns:
        Configured Flask application
    """
    if config is None:
        config = load_injector_config()

    app = Flask(__name__)
    app.config["INJECTOR_CONFIG"] = config

    @app.route("/mutate", methods=["POST"])
    def mutate():
        body = request.get_json(force=True, silent=True)
        review = handle_admission_review(body, app.config["INJECTOR_CONFIG"])
        return jsonify(review)

    @app.route("/healthz", methods=["GET"])
    def healthz():
        return "ok", 200

    return app


def serve(
    config: InjectorConfig,
    host: str = "0.0.0.0",
    port: int = 8443,
    cert_file: Optional[str] = None,
    key_file: Optional[str] = None,
) -> None:
    """Run the webhook with Flask's server, over TLS when cert and key are given."""
    app = create_app(config)
    ssl_context = (cert_file, key_file) if cert_file and key_file else None
    logger.info(
        f"Starting webhook on {host}:{port} (tls={'on' if ssl_context else 'off'}, "
        f"vault_addr={config.vault_addr or '<unset>'})"
    )
    app.run(host=host, port=port, ssl_context=ssl_context)
