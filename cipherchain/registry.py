"""
Module registry: maps a kind identifier to a default-configured module.

The set of kinds is closed: it is whatever cipherchain.modules registers
on import.
"""

from typing import Any, Dict, List

from . import modules  # noqa: F401  (registers every built-in module)
from .errors import ConfigError, UnknownModuleError
from .framework import MODULE_REGISTRY, TransformModule


def available_modules() -> List[str]:
    return list(MODULE_REGISTRY.keys())


def create(kind: str, **params) -> TransformModule:
    """Return a fresh module of the given kind with default config."""
    try:
        cls = MODULE_REGISTRY[kind]
    except KeyError:
        raise UnknownModuleError(kind) from None
    return cls(**params)


def module_from_record(record: Dict[str, Any]) -> TransformModule:
    """Rebuild a module from its {kind, config, enabled, direction} record."""
    if not isinstance(record, dict) or "kind" not in record:
        raise ConfigError(f"Malformed module record: {record!r}")
    return create(record["kind"]).apply_record(record)
