"""Command-line interface for the secret puller injector.

This module provides the main CLI entrypoint, allowing users to run the
admission webhook or to inject the secret puller into manifests offline.
"""

import argparse
import logging
import sys
from pathlib import Path

from secret_puller_injector.core.config import load_injector_config
from secret_puller_injector.core.errors import InjectorError
from secret_puller_injector.k8s.manifests import dump_manifests, inject_manifests, load_manifests

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entrypoint for the injector."""
    parser = argparse.ArgumentParser(
        prog="secret-puller-injector",
        description="Inject the samson secret puller into annotated workloads",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the admission webhook over TLS
  secret-puller-injector serve --cert-file /tls/tls.crt --key-file /tls/tls.key

  # Inject into a manifest file and print the result
  VAULT_ADDR=https://vault:8200 secret-puller-injector inject deployment.yaml

  # Write the result to a file
  secret-puller-injector inject deployment.yaml -o injected.yaml -v

Note:
  VAULT_ADDR, VAULT_SSL_VERIFY and INJECTOR_GATE_PODS are read from config.json
  ({"vault": {"addr": ...}}) with the environment as fallback.
"""
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.json (default: ./config.json)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the mutating admission webhook"
    )
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8443, help="Listen port (default: 8443)")
    serve_parser.add_argument("--cert-file", help="TLS certificate file")
    serve_parser.add_argument("--key-file", help="TLS private key file")
    serve_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    inject_parser = subparsers.add_parser(
        "inject",
        help="Inject into a YAML manifest file"
    )
    inject_parser.add_argument(
        "input",
        help="Path to input manifest (use - for stdin)"
    )
    inject_parser.add_argument(
        "-o", "--output",
        help="Output file (default: stdout)"
    )
    inject_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args(argv)

    # Setup logging
    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    else:
        logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')

    if args.command == "serve":
        return cmd_serve(args)
    elif args.command == "inject":
        return cmd_inject(args)
    else:
        parser.print_help()
        return 1


def cmd_serve(args):
    """Handle serve command."""
    from secret_puller_injector.webhook.app import serve

    if bool(args.cert_file) != bool(args.key_file):
        print("Error: --cert-file and --key-file must be given together", file=sys.stderr)
        return 1

    config = load_injector_config(args.config)
    serve(config, host=args.host, port=args.port, cert_file=args.cert_file, key_file=args.key_file)
    return 0


def cmd_inject(args):
    """Handle inject command."""
    config = load_injector_config(args.config)

    try:
        if args.input == "-":
            documents = load_manifests(sys.stdin)
        else:
            input_path = Path(args.input)
            if not input_path.exists():
                print(f"Error: Input file not found: {input_path}", file=sys.stderr)
                return 1
            with open(input_path, "r", encoding="utf-8") as f:
                documents = load_manifests(f)

        injected = inject_manifests(documents, config)
    except InjectorError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as out:
            dump_manifests(injected, out)
    else:
        dump_manifests(injected, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
