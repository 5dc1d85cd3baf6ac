# drupal/jsonapi/core/loader.py
"""
Helpers for YAML-driven configuration: glob loading, ``${VAR}``
substitution and ``module:attr`` imports for hook callables.
"""
from __future__ import annotations

import importlib
import logging
import os
import re
from glob import glob
from pathlib import Path
from typing import Any, Callable, Iterable

import yaml

logger = logging.getLogger(__name__)

# ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def import_attr(path: str) -> Any:
    """
    Import an attribute given as ``'module.path:attribute'``.

    Raises:
        ValueError: If path format is invalid
        ImportError: If module cannot be imported
        AttributeError: If attribute doesn't exist
    """
    if ":" not in path:
        raise ValueError(f"Invalid import path '{path}', expected 'module:attr'")

    mod_name, attr = path.split(":", 1)
    try:
        mod = importlib.import_module(mod_name)
    except ImportError as exc:
        logger.error("Failed to import module '%s'", mod_name)
        raise ImportError(f"Cannot import module '{mod_name}'") from exc

    try:
        return getattr(mod, attr)
    except AttributeError as exc:
        logger.error("Module '%s' has no attribute '%s'", mod_name, attr)
        raise AttributeError(f"Module '{mod_name}' has no attribute '{attr}'") from exc


def import_callables(paths: dict[str, str] | None, kind: str) -> dict[str, Callable[..., Any]]:
    """Resolve a ``name -> 'module:attr'`` mapping into callables."""
    out: dict[str, Callable[..., Any]] = {}
    for name, path in (paths or {}).items():
        fn = import_attr(path)
        if not callable(fn):
            raise TypeError(f"{kind} '{name}' ({path}) is not callable")
        out[name] = fn
    return out


def substitute_env_vars(value: Any) -> Any:
    """
    Recursively substitute ``${VAR}`` / ``${VAR:-default}`` in config values.

    Raises:
        ValueError: If a required env var is not set and has no default
    """
    if isinstance(value, str):
        return _substitute_string(value)
    if isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    return value


def _substitute_string(value: str) -> str:
    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        default = match.group(2)

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if default is not None:
            return default
        raise ValueError(
            f"Environment variable '{var_name}' is not set and no default provided"
        )

    return ENV_VAR_PATTERN.sub(replacer, value)


def load_yaml_files(patterns: Iterable[str]) -> list[dict[str, Any]]:
    """
    Load every YAML file matching the glob patterns, in sorted order.

    Later documents override earlier ones when merged by the caller.
    """
    patterns = list(patterns)
    files: list[Path] = []
    for pattern in patterns:
        files.extend(Path(m).resolve() for m in glob(pattern))

    files = sorted(set(files))
    if not files:
        logger.debug("No config files found matching patterns: %s", patterns)
        return []

    logger.info("Loading config files: %s", [str(f) for f in files])

    out: list[dict[str, Any]] = []
    for f in files:
        try:
            with f.open("r", encoding="utf-8") as fh:
                out.append(yaml.safe_load(fh) or {})
        except Exception as exc:
            logger.error("Failed to load YAML file '%s': %s", f, exc)
            raise
    return out
