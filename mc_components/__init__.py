"""Semantic document components for Typst, HTML and Reveal.js output.

This package recognises class-labelled containers and spans (``card-grid``,
``timeline``, ``badge``, ``value-box`` and friends) in a parsed document,
extracts their structure, and replaces them with backend-native output. It
runs as a Pandoc JSON filter or as a Python-Markdown extension.

Exports
-------
- ``app``: Cyclopts application behind the ``mc-components`` command.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``filter_document``: Rewrite a decoded Pandoc JSON document.
- ``ComponentsExtension``: Python-Markdown extension for HTML output.

Examples
--------
>>> from mc_components import filter_document
>>> doc = {"pandoc-api-version": [1, 23, 1], "meta": {}, "blocks": []}
>>> filter_document(doc, "typst")["blocks"]
[]
"""

from __future__ import annotations

from .adapters.pandoc import filter_document
from .cli import app, main
from .markdown_ext import ComponentsExtension
from .model import ComponentError, StructuralError

__all__ = [
    "ComponentError",
    "ComponentsExtension",
    "StructuralError",
    "app",
    "filter_document",
    "main",
]
