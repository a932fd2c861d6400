"""Backend strategy interface shared by the Typst and DOM renderers."""

from __future__ import annotations

import abc
import dataclasses as dc
import enum
import typing as typ

from mc_components.model import AttributeValue, Instruction, Placement, Wrap

if typ.TYPE_CHECKING:
    from mc_components.config.models import ComponentConfig
    from mc_components.model import CardGrid, Timeline
    from mc_components.registry import ResolvedComponent

Attributes = typ.Mapping[str, AttributeValue]


class BackendKind(enum.Enum):
    """Mutually exclusive output targets."""

    TYPST = "typst"
    DOM_STANDARD = "html"
    DOM_PRESENTATION = "revealjs"


@dc.dataclass(frozen=True, slots=True)
class FormatDefaults:
    """Per-format defaults applied when a component leaves a setting unset."""

    class_prefix: str = ""
    columns: int = 3
    progress_height: str = "1.5em"


def should_pass_args(config: ComponentConfig, attributes: Attributes) -> bool:
    """Return ``True`` when a call needs an argument list."""
    return config.arguments or bool(attributes)


class Backend(abc.ABC):
    """Serialise component records into one backend's syntax."""

    kind: typ.ClassVar[BackendKind]
    raw_format: typ.ClassVar[str]

    def __init__(self, defaults: FormatDefaults | None = None) -> None:
        self.defaults = defaults or FormatDefaults()

    def block(self, code: str) -> Instruction:
        """Return ``code`` as a block-level instruction for this backend."""
        return Instruction(code, Placement.BLOCK, self.raw_format)

    def inline(self, code: str) -> Instruction:
        """Return ``code`` as an inline instruction for this backend."""
        return Instruction(code, Placement.INLINE, self.raw_format)

    @abc.abstractmethod
    def wrapper(self, component: ResolvedComponent, attributes: Attributes) -> Wrap:
        """Return open/close markers for a container threaded through untouched."""

    @abc.abstractmethod
    def function_call(
        self, component: ResolvedComponent, content: str, attributes: Attributes
    ) -> str:
        """Return a single inline call carrying ``content`` as escaped text."""

    @abc.abstractmethod
    def badge(
        self, component: ResolvedComponent, content: str, attributes: Attributes
    ) -> str:
        """Render an inline badge."""

    @abc.abstractmethod
    def value_box(self, component: ResolvedComponent, attributes: Attributes) -> str:
        """Render a value box from its attributes."""

    @abc.abstractmethod
    def progress(self, component: ResolvedComponent, attributes: Attributes) -> str:
        """Render a progress bar from its attributes."""

    @abc.abstractmethod
    def divider(
        self, component: ResolvedComponent, attributes: Attributes, label: str
    ) -> str | Wrap:
        """Render a divider, or wrap its content when the backend supports that."""

    @abc.abstractmethod
    def card_grid(self, component: ResolvedComponent, grid: CardGrid) -> str:
        """Render a grid of cards."""

    @abc.abstractmethod
    def timeline(self, component: ResolvedComponent, timeline: Timeline) -> str:
        """Render a timeline; ``component`` is the orientation's mapping entry."""

    @abc.abstractmethod
    def code_window(
        self, wrapper: str, code: str, language: str, filename: str, *, is_auto: bool
    ) -> str | Wrap | None:
        """Decorate a code block with its filename, or return ``None`` to skip."""


__all__ = [
    "Attributes",
    "Backend",
    "BackendKind",
    "FormatDefaults",
    "should_pass_args",
]
