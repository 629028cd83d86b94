"""
YAML configuration loading and validation.

Example file::

    env_file: .env
    rpc_endpoint: ${SOLANA_RPC_ENDPOINT}
    private_key: ${SOLANA_PRIVATE_KEY}
    program_id: 6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P
    priority_fees:
      fixed_amount: 50000
      hard_cap: 1000000
    trade:
      min_balance_buffer: 5000
    commitments:
      curve: [finalized, confirmed]
      confirm: confirmed
"""

import os
from typing import Any

import yaml
from dotenv import load_dotenv

from burn_buyer.config import VALID_COMMITMENTS, BurnBuyerConfig, parse_program_id
from burn_buyer.core.exceptions import ConfigurationError

REQUIRED_FIELDS = [
    "rpc_endpoint",
]

CONFIG_VALIDATION_RULES = [
    ("priority_fees.fixed_amount", int, 0, float("inf"), "priority_fees.fixed_amount must be a non-negative integer"),
    ("priority_fees.hard_cap", int, 0, float("inf"), "priority_fees.hard_cap must be a non-negative integer"),
    ("trade.min_balance_buffer", int, 0, float("inf"), "trade.min_balance_buffer must be a non-negative integer"),
]

# Valid values for enum-like fields
VALID_VALUES = {
    "commitments.confirm": list(VALID_COMMITMENTS),
}


def load_config_file(path: str) -> BurnBuyerConfig:
    """Load and validate a configuration from a YAML file."""
    try:
        with open(path) as f:
            config = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    env_file = config.get("env_file")
    if env_file:
        env_path = os.path.join(os.path.dirname(path), env_file)
        if os.path.exists(env_path):
            load_dotenv(env_path, override=True)
        else:
            load_dotenv(env_file, override=True)

    resolve_env_vars(config)
    validate_config(config)
    return build_config(config)


def resolve_env_vars(config: dict) -> None:
    """Recursively resolve ${VAR} references in the configuration."""
    def resolve_env(value):
        if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            env_value = os.getenv(env_var)
            if env_value is None:
                raise ConfigurationError(f"Environment variable '{env_var}' not found")
            return env_value
        return value

    def resolve_all(d):
        for k, v in d.items():
            if isinstance(v, dict):
                resolve_all(v)
            else:
                d[k] = resolve_env(v)

    resolve_all(config)


def get_nested_value(config: dict, path: str) -> Any:
    """Get a nested value from the configuration using dot notation."""
    keys = path.split(".")
    value = config
    for key in keys:
        if not isinstance(value, dict) or key not in value:
            raise KeyError(path)
        value = value[key]
    return value


def validate_config(config: dict) -> None:
    """Validate the configuration against the rules above.

    Raises:
        ConfigurationError: On the first violated rule
    """
    for path in REQUIRED_FIELDS:
        try:
            get_nested_value(config, path)
        except KeyError:
            raise ConfigurationError(f"Missing required config key: {path}") from None

    for path, expected_type, min_val, max_val, error_msg in CONFIG_VALIDATION_RULES:
        try:
            value = get_nested_value(config, path)
        except KeyError:
            continue

        # bool is an int subclass but never a valid amount
        if isinstance(value, bool) or not isinstance(value, expected_type):
            raise ConfigurationError(f"Type error: {error_msg}")
        if not (min_val <= value <= max_val):
            raise ConfigurationError(f"Range error: {error_msg}")

    for path, valid_values in VALID_VALUES.items():
        try:
            value = get_nested_value(config, path)
        except KeyError:
            continue
        if value not in valid_values:
            raise ConfigurationError(f"{path} must be one of {valid_values}")

    try:
        curve_commitments = get_nested_value(config, "commitments.curve")
    except KeyError:
        return
    if (
        not isinstance(curve_commitments, list)
        or len(curve_commitments) != 2
        or any(c not in VALID_COMMITMENTS for c in curve_commitments)
    ):
        raise ConfigurationError(
            f"commitments.curve must be a pair of levels from {list(VALID_COMMITMENTS)}"
        )


def build_config(config: dict) -> BurnBuyerConfig:
    """Turn a validated configuration mapping into a BurnBuyerConfig."""
    values: dict[str, Any] = {"rpc_endpoint": config["rpc_endpoint"]}

    if config.get("private_key"):
        values["private_key"] = config["private_key"]
    if config.get("program_id"):
        values["program_id"] = parse_program_id(config["program_id"])

    priority_fees = config.get("priority_fees") or {}
    if "fixed_amount" in priority_fees:
        values["priority_fee"] = priority_fees["fixed_amount"]
    if "hard_cap" in priority_fees:
        values["priority_fee_hard_cap"] = priority_fees["hard_cap"]

    trade = config.get("trade") or {}
    if "min_balance_buffer" in trade:
        values["min_balance_buffer"] = trade["min_balance_buffer"]

    commitments = config.get("commitments") or {}
    if "curve" in commitments:
        values["curve_commitments"] = tuple(commitments["curve"])
    if "confirm" in commitments:
        values["confirm_commitment"] = commitments["confirm"]

    return BurnBuyerConfig(**values)
