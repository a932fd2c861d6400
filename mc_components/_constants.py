"""Common literal values used across mc_components.

These constants keep metadata keys, class prefixes, and raw output formats
centralized so the registry, backends, adapters, and tests can import the same
values without drifting. Intended for internal use within the mc_components
package.

Examples
--------
>>> from mc_components import _constants
>>> _constants.FUNCTION_TEMPLATE.format(name="card-grid")
'mc-card-grid'
>>> _constants.BEM_PREFIX
'mc'
"""

META_KEY = "mc-components"
BEM_PREFIX = "mc"
FUNCTION_TEMPLATE = BEM_PREFIX + "-{name}"

RAW_TYPST = "typst"
RAW_HTML = "html"

CARD_CLASS = "card"
EVENT_CLASS = "event"
HORIZONTAL_TIMELINE_CLASS = "horizontal-timeline"
TIMELINE_CLASS = "timeline"

DEFAULT_CODE_WINDOW_WRAPPER = FUNCTION_TEMPLATE.format(name="code-window")
