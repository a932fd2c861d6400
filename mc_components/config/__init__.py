"""Load and validate component mapping configuration.

This subpackage parses the user-facing ``mc-components`` settings, whether
they come from a YAML file (``load_extension_config``) or from a document's
metadata block (``build_extension_config``), and produces immutable
dataclasses (:class:`ExtensionConfig`, :class:`ComponentMappings`,
:class:`ComponentConfig`) that the rewrite driver consumes. The settings hold
only the user's entries; the registry merges them over the built-in table.

Examples
--------
>>> from mc_components.config import build_extension_config
>>> config = build_extension_config({"divs": {"callout-box": {"wrapper": "my-box"}}})
>>> config.mappings.divs["callout-box"].wrapper
'my-box'
"""

from .loader import build_extension_config, load_extension_config
from .models import (
    CodeWindowConfig,
    ComponentConfig,
    ComponentMappings,
    ExtensionConfig,
    MappingConfigError,
)

__all__ = [
    "CodeWindowConfig",
    "ComponentConfig",
    "ComponentMappings",
    "ExtensionConfig",
    "MappingConfigError",
    "build_extension_config",
    "load_extension_config",
]
