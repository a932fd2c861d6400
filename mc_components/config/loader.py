"""Load user component mappings from YAML files or document metadata."""

from __future__ import annotations

import typing as typ

from ruamel.yaml import YAML

from mc_components._constants import META_KEY

from .helpers import _build_namespace, _merge_code_window
from .models import ComponentMappings, ExtensionConfig, MappingConfigError

if typ.TYPE_CHECKING:
    from pathlib import Path


def load_extension_config(path: Path) -> ExtensionConfig:
    """Load user component mappings from a YAML file.

    The file may hold the settings at its root or under an ``mc-components``
    key, so a project file such as ``_quarto.yml`` can be passed directly.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration.

    Returns
    -------
    ExtensionConfig
        User mappings (not yet merged with the built-in table) and code-window
        settings.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    MappingConfigError
        If the top-level structure or any mapping entry is malformed.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_extension_config(Path("_quarto.yml"))  # doctest: +SKIP
    >>> sorted(config.mappings.divs)  # doctest: +SKIP
    ['callout-box']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = f"Top-level YAML structure in '{path}' must be a mapping."
        raise MappingConfigError(msg)
    section = loaded.get(META_KEY, loaded)
    return build_extension_config(section)


def build_extension_config(
    section: typ.Mapping[str, typ.Any] | None,
    base: ExtensionConfig | None = None,
) -> ExtensionConfig:
    """Parse a configuration section, overlaying it onto ``base``.

    Parameters
    ----------
    section : Mapping or None
        Mapping with optional ``divs``, ``spans`` and ``code-window`` keys.
    base : ExtensionConfig, optional
        Previously loaded configuration (for example from a YAML file) that
        ``section`` overrides entry by entry.

    Returns
    -------
    ExtensionConfig
        The combined user configuration.
    """
    base = base or ExtensionConfig()
    if section is None:
        return base
    if not isinstance(section, dict):
        msg = f"'{META_KEY}' configuration must be a mapping."
        raise MappingConfigError(msg)

    user_mappings = ComponentMappings(
        divs=_build_namespace("divs", section.get("divs")),
        spans=_build_namespace("spans", section.get("spans")),
    )
    code_window_raw = section.get("code-window")
    if code_window_raw is not None and not isinstance(code_window_raw, dict):
        msg = "'code-window' configuration must be a mapping."
        raise MappingConfigError(msg)
    return ExtensionConfig(
        mappings=base.mappings.merged_with(user_mappings),
        code_window=_merge_code_window(base.code_window, code_window_raw),
    )


__all__ = ["build_extension_config", "load_extension_config"]
