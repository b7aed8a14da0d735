"""Centralized configuration loading for the injector.

This module provides utilities for loading and accessing configuration from config.json
with support for environment variable fallbacks and default values, and builds the
immutable InjectorConfig that is passed to the mutation engine.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.json"

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class InjectorConfig:
    """Credential endpoint settings and injection policy.

    Built once at process start and handed to every request.

    Attributes:
        vault_addr: Address of the credential backend, passed verbatim to the
                    init container as VAULT_ADDR. Blank means "not configured".
        vault_verify_tls: Rendered into VAULT_SSL_VERIFY
        gate_pods: Require the opt-in annotation on bare Pods too. Pod
                   templates are always gated. Defaults to True, which differs
                   from the older ungated Pod behavior; set False (or
                   INJECTOR_GATE_PODS=false) to inject every Pod.
    """
    vault_addr: str = ""
    vault_verify_tls: bool = False
    gate_pods: bool = True


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load configuration from JSON file.

    Returns empty dict if file doesn't exist or is invalid.

    Args:
        config_path: Path to config.json file (default: "config.json")

    Returns:
        Configuration dictionary, or empty dict if file not found/invalid
    """
    path = Path(config_path)

    if not path.exists():
        return {}

    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {config_path}: top level is not an object")
        return {}
    return data


def get_config_value(
    keys: List[str], default: Any = None, config: Optional[Dict[str, Any]] = None
) -> Any:
    """Get nested configuration value with fallback to environment variable.

    Supports dot-notation keys like ["vault", "addr"] or ["injector", "gate_pods"].
    Also checks environment variables as fallback (e.g., VAULT_ADDR for vault.addr).

    Args:
        keys: List of keys to traverse (e.g., ["vault", "addr"])
        default: Default value if key not found
        config: Optional config dict (uses load_config() if not provided)

    Returns:
        Configuration value, or default if not found
    """
    if config is None:
        config = load_config()

    value = config
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
            if value is None:
                break
        else:
            value = None
            break

    if value is not None:
        return value

    env_key = "_".join(k.upper() for k in keys)
    env_value = os.environ.get(env_key)
    if env_value is not None:
        return env_value

    return default


def parse_bool(value: Any, default: bool = False) -> bool:
    """Interpret a config value as a boolean.

    Accepts real booleans and the usual string spellings ("true", "1", "off", ...).
    Unrecognized values fall back to ``default``.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    logger.warning(f"Unrecognized boolean value {value!r}, using {default}")
    return default


def load_injector_config(config_path: Optional[str] = None) -> InjectorConfig:
    """Build the InjectorConfig from config.json and the environment.

    A missing address is not an error here; the mutation engine rejects it
    when a workload actually asks for injection.

    Args:
        config_path: Path to config.json (default: "config.json")

    Returns:
        Frozen InjectorConfig
    """
    config = load_config(config_path or DEFAULT_CONFIG_PATH)

    vault_addr = get_config_value(["vault", "addr"], default="", config=config)
    verify_tls = get_config_value(["vault", "ssl_verify"], default=False, config=config)
    gate_pods = get_config_value(["injector", "gate_pods"], default=True, config=config)

    result = InjectorConfig(
        vault_addr=str(vault_addr),
        vault_verify_tls=parse_bool(verify_tls, default=False),
        gate_pods=parse_bool(gate_pods, default=True),
    )
    if not result.vault_addr.strip():
        logger.warning("VAULT_ADDR is not set; annotated workloads will be rejected")
    return result
