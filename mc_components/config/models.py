"""Typed dataclasses describing component mapping configuration."""

from __future__ import annotations

import dataclasses as dc
import types
import typing as typ

from mc_components._constants import DEFAULT_CODE_WINDOW_WRAPPER
from mc_components.model import ComponentError, ElementKind


class MappingConfigError(ComponentError):
    """Raised when component mapping configuration is malformed."""


@dc.dataclass(frozen=True, slots=True)
class ComponentConfig:
    """Target function for a semantic class.

    Attributes
    ----------
    wrapper : str
        Name of the Typst function the class renders to.
    arguments : bool
        Force an argument list even when the element carries no attributes.
    """

    wrapper: str
    arguments: bool = False


def _freeze(
    entries: typ.Mapping[str, ComponentConfig] | None,
) -> typ.Mapping[str, ComponentConfig]:
    return types.MappingProxyType(dict(entries or {}))


@dc.dataclass(frozen=True, slots=True)
class ComponentMappings:
    """Class mappings for container (``divs``) and inline (``spans``) elements."""

    divs: typ.Mapping[str, ComponentConfig] = dc.field(default_factory=dict)
    spans: typ.Mapping[str, ComponentConfig] = dc.field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "divs", _freeze(self.divs))
        object.__setattr__(self, "spans", _freeze(self.spans))

    def merged_with(self, override: ComponentMappings | None) -> ComponentMappings:
        """Return a copy where each entry of ``override`` replaces ours whole."""
        if override is None:
            return self
        return ComponentMappings(
            divs={**self.divs, **override.divs},
            spans={**self.spans, **override.spans},
        )

    def namespace(self, kind: ElementKind) -> typ.Mapping[str, ComponentConfig]:
        """Return the mapping table consulted for elements of ``kind``."""
        if kind is ElementKind.CONTAINER:
            return self.divs
        if kind is ElementKind.INLINE:
            return self.spans
        return types.MappingProxyType({})


@dc.dataclass(frozen=True, slots=True)
class CodeWindowConfig:
    """Settings for decorating code blocks with a filename header."""

    enabled: bool = False
    auto_filename: bool = False
    wrapper: str = DEFAULT_CODE_WINDOW_WRAPPER


@dc.dataclass(frozen=True, slots=True)
class ExtensionConfig:
    """Configuration consumed by one document build."""

    mappings: ComponentMappings = dc.field(default_factory=ComponentMappings)
    code_window: CodeWindowConfig = dc.field(default_factory=CodeWindowConfig)


__all__ = [
    "CodeWindowConfig",
    "ComponentConfig",
    "ComponentMappings",
    "ExtensionConfig",
    "MappingConfigError",
]
