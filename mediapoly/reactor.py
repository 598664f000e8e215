""" Media query reactor

Re-evaluates the media rules of a surface each time its size settles.

+ Update loop (one call to `MediaQuery.on_update` per host tick):
    - First tick: collect the rules of every non-base stylesheet and apply them.
    - Size changed: remember the size and wait.
    - Size unchanged after a change: apply the rules matching the new width.

Only one generated stylesheet is attached to a surface at a time. Each apply
removes the previous one before attaching the next.
"""

from __future__ import annotations
from enum import Enum, auto
import logging
from typing import Any, Protocol

from mediapoly.config import OptionalOptions, Options, default_options
from mediapoly.css.media import MalformedWidthError, extract_rules
from mediapoly.rules import RuleStore, active_rules
from mediapoly.surface import Size, Surface

__all__ = ["MediaQuery", "State", "StylesheetCompiler"]

logger = logging.getLogger(__name__)

class StylesheetCompiler(Protocol):
    def compile(self, source: str) -> Any:
        """Compile stylesheet text. Any exception raised counts as a failed compile."""
        ...

class State(Enum):
    Uninitialized = auto()
    Tracking = auto()

class MediaQuery:
    """Media query session for a single surface.

    Args
        compiler (StylesheetCompiler | None): Turns the merged rule bodies into an
            attachable stylesheet. `None` means no compiler is available and nothing is
            ever attached.
        options (OptionalOptions | None): See `mediapoly.config.DEFAULTS`.
    """

    def __init__(
        self,
        compiler: StylesheetCompiler | None = None,
        options: OptionalOptions | None = None,
    ) -> None:
        self.compiler = compiler
        self.options: Options = default_options(options)
        self.store = RuleStore()
        self.state = State.Uninitialized
        self.previous: Size | None = None
        self.resizing = False

    @property
    def generated_name(self) -> str:
        return self.options["generated_name"]

    def on_update(self, surface: Surface):
        """Observe the surface once. Call this on every host tick."""
        size = tuple(surface.size)
        if self.state is State.Uninitialized:
            self.state = State.Tracking
            self.previous = size
            self.load_stylesheets(surface)
            self.apply(surface)
        elif self.previous != size:
            self.previous = size
            self.resizing = True
        elif self.resizing:
            self.resizing = False
            logger.debug("Surface settled at %s", size)
            self.apply(surface)

    def load_stylesheets(self, surface: Surface):
        """Collect the media rules of every stylesheet after the base stylesheets."""
        for stylesheet in surface.stylesheets[self.options["base_stylesheets"]:]:
            try:
                rules = extract_rules(stylesheet.read())
            except (OSError, UnicodeDecodeError, LookupError) as error:
                logger.warning("Skipping stylesheet %r: %s", stylesheet, error)
                continue
            logger.debug("Found %d media rule(s) in %r", len(rules), stylesheet)
            self.store.extend(rules)

    def apply(self, surface: Surface) -> Any | None:
        """Replace the generated stylesheet with the rules active at the surface width.

        Returns
            The attached stylesheet, or `None` when nothing was attached.
        """
        width = surface.size[0]
        try:
            rules = active_rules(self.store, width, self.options["rem"])
        except MalformedWidthError as error:
            logger.warning("Media queries not updated at width %s: %s", width, error)
            return None

        surface.detach(self.generated_name)
        if len(rules) == 0:
            logger.debug("No media rules active at width %s", width)
            return None

        if self.compiler is None:
            logger.warning("No stylesheet compiler available, media queries not applied")
            return None

        source = "".join(f"{rule.body}\n" for rule in rules)
        try:
            stylesheet = self.compiler.compile(source)
        except Exception as error:
            logger.warning("Generated stylesheet failed to compile: %s", error)
            return None

        surface.attach(stylesheet, self.generated_name, non_editable=True)
        logger.info("Applied %d media rule(s) at width %s", len(rules), width)
        return stylesheet
