""" @media rule extraction
https://developer.mozilla.org/en-US/docs/Web/CSS/@media

Only width conditions drive matching:

@media (min-width: 300px), (max-width: 25rem) {
    .selector { <declarations/> }
}

Each comma separated branch becomes its own `MediaRule` sharing the block body.
`min-height`/`max-height` terms are recognized and removed but never produce bounds.
Any other parenthesized term drops the branch.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import re
from typing import Literal

from typing_extensions import TypeAliasType

from mediapoly.config import REM
from mediapoly.css.scanner import Scanner, strip_comments

__all__ = [
    "Unit",
    "Dimension",
    "MediaRule",
    "MalformedWidthError",
    "MIN_WIDTH",
    "MAX_WIDTH",
    "parse_width",
    "parse_branch",
    "extract_rules",
]

logger = logging.getLogger(__name__)

Unit = TypeAliasType("Unit", Literal["px", "rem"])

MEDIA = re.compile(r"@media(?![\w-])")
MIN_WIDTH = re.compile(r"\(\s*min-width\s*:\s*(\s*[0-9.]+)(px|rem)\s*\)")
MAX_WIDTH = re.compile(r"\(\s*max-width\s*:\s*(\s*[0-9.]+)(px|rem)\s*\)")
MIN_MAX_HXW = re.compile(r"\(\s*m(in|ax)-(height|width)\s*:\s*(\s*[0-9.]+)(px|rem)\s*\)")
OTHER = re.compile(r"\([^)]*\)")

class MalformedWidthError(ValueError): pass

@dataclass(frozen=True)
class Dimension:
    """A width bound kept as text until it is matched against a size."""

    raw: str
    unit: Unit

    @staticmethod
    def parse(text: str) -> Dimension:
        """Split `<number><unit>` text, e.g. the output of `parse_width`."""
        text = text.strip()
        for unit in ("rem", "px"):
            if text.endswith(unit):
                return Dimension(text[: -len(unit)].strip(), unit)
        raise MalformedWidthError(f"Unsupported width unit in {text!r}")

    @property
    def value(self) -> float:
        try:
            return float(self.raw)
        except ValueError as error:
            raise MalformedWidthError(f"Invalid width {str(self)!r}") from error

    def pixels(self, rem: float = REM) -> float:
        """Value of the dimension in pixels. `rem` is the pixels per rem multiplier."""
        if self.unit == "rem":
            return self.value * rem
        return self.value

    def __str__(self) -> str:
        return f"{self.raw}{self.unit}"

@dataclass(frozen=True)
class MediaRule:
    has_condition: bool
    min_width: Dimension | None
    max_width: Dimension | None
    body: str
    condition: str = ""

    def __repr__(self) -> str:
        return f"MediaRule({self.condition!r}, min={self.min_width}, max={self.max_width})"

def parse_width(pattern: re.Pattern[str], condition: str) -> str | None:
    """Apply a `MIN_WIDTH` or `MAX_WIDTH` pattern to the condition.

    Returns
        The captured number and unit, e.g. `"25rem"`, or `None` when the bound is absent.
    """
    match = pattern.search(condition)
    if match is None:
        return None
    return f"{match.group(1).strip()}{match.group(2)}"

def _dimension_(pattern: re.Pattern[str], condition: str) -> Dimension | None:
    if (width := parse_width(pattern, condition)) is None:
        return None
    return Dimension.parse(width)

def parse_branch(branch: str, body: str) -> MediaRule | None:
    """Build the rule for one comma separated branch of a media condition list.

    Returns
        `None` when the branch holds a term other than a min/max width or height check.
    """
    condition = branch.strip()
    if OTHER.search(MIN_MAX_HXW.sub("", condition)) is not None:
        logger.debug("Dropping unsupported media condition %r", condition)
        return None

    return MediaRule(
        has_condition=condition.startswith("("),
        min_width=_dimension_(MIN_WIDTH, condition),
        max_width=_dimension_(MAX_WIDTH, condition),
        body=body,
        condition=condition,
    )

def extract_rules(source: str) -> list[MediaRule]:
    """Find every `@media` block in the stylesheet and parse its condition list.

    Blocks other than `@media` are ignored, and so are media blocks nested deeper than
    one level of selector blocks.
    """
    scanner = Scanner(strip_comments(source), max_depth=1)
    rules: list[MediaRule] = []
    for block in scanner:
        if (media := MEDIA.match(block.prelude)) is None:
            continue
        for branch in block.prelude[media.end():].split(","):
            if (rule := parse_branch(branch, block.body)) is not None:
                rules.append(rule)

    for error in scanner.errors:
        logger.debug("Skipped stylesheet block: %s", error)
    return rules
