"""
Configuration Loader for SARIF Compare.

Implements a layered configuration system:
    hardcoded defaults < YAML config file < env vars < CLI args

Usage:
    from sarif_compare.config import build_unified_config, validate_config
    config = build_unified_config(cli_args=args)
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from sarif_compare.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".sarif-compare.yml"
CONFIG_ENV_VAR = "SARIF_COMPARE_CONFIG"

# ---------------------------------------------------------------------------
# Default configuration
# ---------------------------------------------------------------------------


def get_default_config() -> Dict[str, Any]:
    """Return all configuration parameters with their defaults.

    This is the lowest-priority layer. Every configurable key appears here
    so that downstream code never needs to guard against missing keys.
    """
    return {
        # -- Output --
        "output_dir": "sarif-compare-results",
        "export_formats": ["xlsx"],
        "comparison_filename": "sarif-comparison.xlsx",
        "summary_filename": "sarif-summary.xlsx",

        # -- Ingestion --
        "run_index": 0,

        # -- Logging --
        "log_level": "INFO",
    }

# ---------------------------------------------------------------------------
# YAML config file
# ---------------------------------------------------------------------------

_OUTPUT_KEY_MAP = {
    "dir": "output_dir",
    "formats": "export_formats",
    "comparison_file": "comparison_filename",
    "summary_file": "summary_filename",
}


def _split_formats(value: Any) -> List[str]:
    """Accept ``"xlsx,json"`` or ``["xlsx", "json"]``."""
    if isinstance(value, str):
        return [item.strip().lower() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item).strip().lower() for item in value]
    raise ConfigError(f"export formats must be a comma-separated string or a list, got {value!r}")


def flatten_config(nested: dict) -> Dict[str, Any]:
    """Convert a nested config YAML dict to a flat config dict.

    Mapping rules:
    - ``nested["output"]["dir"]``             -> ``output_dir``
    - ``nested["output"]["formats"]``         -> ``export_formats``
    - ``nested["output"]["comparison_file"]`` -> ``comparison_filename``
    - ``nested["output"]["summary_file"]``    -> ``summary_filename``
    - ``nested["comparison"]["run_index"]``   -> ``run_index``
    - ``nested["logging"]["level"]``          -> ``log_level``

    Only non-None values are included.
    Raises ConfigError when ``output.formats`` is neither a string nor a list.
    """
    flat: Dict[str, Any] = {}

    output = nested.get("output")
    if isinstance(output, dict):
        for key, config_key in _OUTPUT_KEY_MAP.items():
            if output.get(key) is not None:
                flat[config_key] = output[key]
        if "export_formats" in flat:
            flat["export_formats"] = _split_formats(flat["export_formats"])

    comparison = nested.get("comparison")
    if isinstance(comparison, dict) and comparison.get("run_index") is not None:
        flat["run_index"] = comparison["run_index"]

    log_section = nested.get("logging")
    if isinstance(log_section, dict) and log_section.get("level") is not None:
        flat["log_level"] = str(log_section["level"]).upper()

    return flat


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML config file and return a flat config dict.

    An explicit ``path`` must exist. Without one, ``SARIF_COMPARE_CONFIG``
    and then ``.sarif-compare.yml`` in the working directory are tried, and
    a missing file simply contributes nothing.

    Raises
    ------
    ConfigError
        If an explicit file is missing, or any file is not valid YAML
        mapping.
    """
    explicit = path is not None
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE)
        explicit = CONFIG_ENV_VAR in os.environ

    config_path = Path(path)
    if not config_path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        return {}

    logger.info("Loading config from %s", config_path)
    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return flatten_config(raw)

# ---------------------------------------------------------------------------
# Environment variable overrides
# ---------------------------------------------------------------------------

# Mapping: (env_var_name, ...) -> (config_key, type)
# Types: "str", "int", "list"
_ENV_MAPPINGS: List[tuple] = [
    (("SARIF_COMPARE_OUTPUT_DIR",),           "output_dir",           "str"),
    (("SARIF_COMPARE_FORMATS",),              "export_formats",       "list"),
    (("SARIF_COMPARE_COMPARISON_FILE",),      "comparison_filename",  "str"),
    (("SARIF_COMPARE_SUMMARY_FILE",),         "summary_filename",     "str"),
    (("SARIF_COMPARE_RUN_INDEX",),            "run_index",            "int"),
    (("SARIF_COMPARE_LOG_LEVEL", "LOG_LEVEL"), "log_level",           "str"),
]


def _coerce(raw: str, type_tag: str) -> Any:
    """Convert a raw env-var string to the appropriate Python type."""
    if type_tag == "int":
        return int(raw)
    if type_tag == "list":
        return _split_formats(raw)
    return raw


def load_env_overrides() -> Dict[str, Any]:
    """Values of the ``SARIF_COMPARE_*`` variables that are set; the first listed name wins."""
    overrides: Dict[str, Any] = {}

    for env_names, config_key, type_tag in _ENV_MAPPINGS:
        env_name = next((name for name in env_names if name in os.environ), None)
        if env_name is None:
            continue
        try:
            overrides[config_key] = _coerce(os.environ[env_name], type_tag)
        except (ValueError, TypeError) as exc:
            logger.warning("Ignoring %s=%r: %s", env_name, os.environ[env_name], exc)

    return overrides

# ---------------------------------------------------------------------------
# CLI argument extraction
# ---------------------------------------------------------------------------

# Mapping: argparse attribute -> config key
_CLI_ATTR_MAP: Dict[str, str] = {
    "output_dir": "output_dir",
    "format": "export_formats",
    "comparison_file": "comparison_filename",
    "summary_file": "summary_filename",
    "run_index": "run_index",
    "log_level": "log_level",
}


def extract_cli_overrides(args: Any) -> Dict[str, Any]:
    """Explicitly-set CLI options as a flat config dict (``None`` means unset)."""
    if args is None:
        return {}

    overrides = {
        config_key: getattr(args, attr)
        for attr, config_key in _CLI_ATTR_MAP.items()
        if getattr(args, attr, None) is not None
    }
    if "export_formats" in overrides:
        overrides["export_formats"] = _split_formats(overrides["export_formats"])
    if getattr(args, "quiet", False):
        overrides.setdefault("log_level", "WARNING")

    return overrides

# ---------------------------------------------------------------------------
# Merge helpers
# ---------------------------------------------------------------------------


def deep_merge(base: dict, override: dict) -> dict:
    """Flat merge where only non-None override values win."""
    return {**base, **{key: value for key, value in override.items() if value is not None}}

# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def build_unified_config(config_path: Optional[str] = None, cli_args: Any = None) -> Dict[str, Any]:
    """Build a fully-merged configuration dict.

    Layer precedence (last wins):
        1. Hard-coded defaults          (``get_default_config()``)
        2. YAML config file             (``load_config_file()``)
        3. Environment variables        (``load_env_overrides()``)
        4. CLI arguments                (``extract_cli_overrides()``)

    Parameters
    ----------
    config_path:
        Explicit config file.  If ``None``, ``cli_args.config`` is used when
        present.
    cli_args:
        An ``argparse.Namespace`` (or ``None``).
    """
    config = get_default_config()

    if config_path is None and cli_args is not None:
        config_path = getattr(cli_args, "config", None)

    file_values = load_config_file(config_path)
    if file_values:
        config = deep_merge(config, file_values)
        logger.info("Applied config file overrides (%d keys)", len(file_values))

    env_overrides = load_env_overrides()
    if env_overrides:
        config = deep_merge(config, env_overrides)
        logger.debug("Applied %d env-var overrides", len(env_overrides))

    cli_overrides = extract_cli_overrides(cli_args)
    if cli_overrides:
        config = deep_merge(config, cli_overrides)
        logger.debug("Applied %d CLI overrides", len(cli_overrides))

    return config

# ---------------------------------------------------------------------------
# Configuration validation
# ---------------------------------------------------------------------------

_VALID_FORMATS = {"xlsx", "json", "md"}
_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def validate_config(config: Dict[str, Any]) -> List[str]:
    """Validate a configuration dict and return a list of warnings/errors.

    Returns
    -------
    list[str]
        Human-readable warning/error messages.  An empty list means the
        config is valid.
    """
    issues: List[str] = []

    formats = config.get("export_formats", [])
    unknown = sorted(set(formats) - _VALID_FORMATS)
    if unknown:
        issues.append(
            f"ERROR: Invalid export format(s) {', '.join(unknown)}. "
            f"Must be one of: {', '.join(sorted(_VALID_FORMATS))}"
        )
    if not formats:
        issues.append("WARNING: export_formats is empty; only the console summary will be produced.")

    run_index = config.get("run_index", 0)
    if not isinstance(run_index, int) or run_index < 0:
        issues.append("ERROR: run_index must be an integer >= 0.")

    level = str(config.get("log_level", "INFO")).upper()
    if level not in _VALID_LOG_LEVELS:
        issues.append(
            f"ERROR: Invalid log_level '{level}'. "
            f"Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )

    for key in ("comparison_filename", "summary_filename"):
        name = str(config.get(key, ""))
        if not name.endswith(".xlsx"):
            issues.append(f"WARNING: {key} '{name}' does not end with .xlsx.")

    return issues


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "CONFIG_ENV_VAR",
    "get_default_config",
    "flatten_config",
    "load_config_file",
    "load_env_overrides",
    "extract_cli_overrides",
    "deep_merge",
    "build_unified_config",
    "validate_config",
]
