"""
YAML configuration loader for SynthCohort.

Configuration is resolved in this order:

1. an explicit path (``--config``)
2. the ``SYNTHCOHORT_CONFIG`` environment variable
3. ``config/simulation.yaml``, ``simulation.yaml`` or
   ``~/.synthcohort/simulation.yaml``

String values may reference the environment as ``${VAR}`` or
``${VAR:-default}``. Dotted ``key.path=value`` overrides (the CLI's
``--set``) are applied on top of the file before validation.
"""

import os
import re
from pathlib import Path
from typing import Any, Iterable

import structlog
import yaml

from synthcohort.config.models import SimulationConfig

logger = structlog.get_logger()

CONFIG_ENV_VAR = "SYNTHCOHORT_CONFIG"

SEARCH_PATHS = (
    Path("config/simulation.yaml"),
    Path("simulation.yaml"),
    Path.home() / ".synthcohort" / "simulation.yaml",
)

_PLACEHOLDER = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")


def _expand(value: Any) -> Any:
    if isinstance(value, str):
        return _PLACEHOLDER.sub(
            lambda m: os.environ.get(m.group("name"), m.group("default") or ""), value
        )
    if isinstance(value, dict):
        return {key: _expand(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand(item) for item in value]
    return value


def find_config_path(config_path: str | Path | None = None) -> Path:
    """
    Resolve which configuration file to read.

    Raises:
        FileNotFoundError: If no candidate exists
    """
    if config_path is not None:
        return Path(config_path)

    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)

    for path in SEARCH_PATHS:
        if path.exists():
            return path

    searched = ", ".join(str(p) for p in SEARCH_PATHS)
    raise FileNotFoundError(
        f"No configuration file found. Set {CONFIG_ENV_VAR} or create one of: {searched}"
    )


def load_yaml(path: Path) -> dict[str, Any]:
    """
    Read a YAML mapping with environment placeholders expanded.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the document is not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        document = yaml.safe_load(f)

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ValueError(f"Configuration root must be a mapping: {path}")

    return _expand(document)


def parse_overrides(assignments: Iterable[str]) -> dict[str, Any]:
    """
    Turn ``key.path=value`` strings into a nested override dictionary.

    Values are parsed as YAML scalars, so ``0.5`` becomes a float and
    ``2012-01-01`` a date.

        >>> parse_overrides(["weight_management.adherence=0.5"])
        {'weight_management': {'adherence': 0.5}}
    """
    overrides: dict[str, Any] = {}
    for assignment in assignments:
        key_path, sep, raw = assignment.partition("=")
        if not sep or not key_path.strip():
            raise ValueError(f"Override must look like key.path=value: {assignment!r}")

        *parents, leaf = key_path.strip().split(".")
        target = overrides
        for part in parents:
            target = target.setdefault(part, {})
            if not isinstance(target, dict):
                raise ValueError(f"Override conflicts with a scalar at {part!r}: {assignment!r}")
        target[leaf] = yaml.safe_load(raw)
    return overrides


def load_config(
    config_path: str | Path | None = None,
    override_values: dict[str, Any] | None = None,
) -> SimulationConfig:
    """
    Load and validate the simulation configuration.

    Args:
        config_path: Explicit YAML path, or None to search
        override_values: Nested values merged over the file

    Returns:
        Validated SimulationConfig

    Raises:
        FileNotFoundError: If no configuration file is found
        pydantic.ValidationError: If the merged values are invalid
    """
    path = find_config_path(config_path)
    values = load_yaml(path)

    if override_values:
        values = _merge(values, override_values)

    logger.debug("config_loaded", path=str(path), overrides=bool(override_values))
    return SimulationConfig(**values)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged
