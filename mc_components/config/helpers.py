"""Utility helpers shared by the mc_components configuration loader."""

from __future__ import annotations

import typing as typ

from .models import CodeWindowConfig, ComponentConfig, MappingConfigError

TRUTHY_STRINGS = frozenset({"true", "yes", "1", "on"})


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_bool(value: object | None, *, default: bool = False) -> bool:
    """Interpret YAML/metadata booleans, accepting ``true``/``yes``/``1`` strings."""
    match value:
        case None:
            return default
        case bool():
            return value
        case int():
            return value != 0
        case _:
            return str(value).strip().lower() in TRUTHY_STRINGS


def _build_component_config(
    namespace: str, key: str, payload: object
) -> ComponentConfig:
    """Build a ComponentConfig from a mapping entry or a bare wrapper name."""
    match payload:
        case str():
            wrapper = _optional_str(payload)
            arguments = False
        case dict():
            wrapper = _optional_str(payload.get("wrapper"))
            arguments = _parse_bool(payload.get("arguments"))
        case _:
            msg = (
                f"Mapping '{namespace}.{key}' must be a wrapper name or a mapping, "
                f"got {type(payload).__name__}."
            )
            raise MappingConfigError(msg)
    if not wrapper:
        msg = f"Mapping '{namespace}.{key}' is missing a 'wrapper' function name."
        raise MappingConfigError(msg)
    return ComponentConfig(wrapper=wrapper, arguments=arguments)


def _build_namespace(
    namespace: str, payload: object | None
) -> dict[str, ComponentConfig]:
    """Parse one mapping namespace (``divs`` or ``spans``) into configs."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        msg = f"'{namespace}' must be a mapping of class names to wrappers."
        raise MappingConfigError(msg)
    return {
        str(key): _build_component_config(namespace, str(key), entry)
        for key, entry in payload.items()
    }


def _merge_code_window(
    base: CodeWindowConfig, override: typ.Mapping[str, typ.Any] | None
) -> CodeWindowConfig:
    """Merge an override code-window mapping into the base CodeWindowConfig."""
    if not override:
        return base
    return CodeWindowConfig(
        enabled=_parse_bool(override.get("enabled"), default=base.enabled),
        auto_filename=_parse_bool(
            override.get("auto-filename"), default=base.auto_filename
        ),
        wrapper=_optional_str(override.get("wrapper")) or base.wrapper,
    )


__all__ = [
    "TRUTHY_STRINGS",
    "_build_component_config",
    "_build_namespace",
    "_merge_code_window",
    "_optional_str",
    "_parse_bool",
]
