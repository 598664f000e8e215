from __future__ import annotations
from typing import Iterable, Iterator, overload

from mediapoly.config import REM
from mediapoly.css.media import MediaRule

__all__ = ["RuleStore", "admits", "active_rules"]

class RuleStore:
    """Append only collection of media rules in source order.

    Rules from every stylesheet of a surface are collected into one store. Matching
    reads the store and never changes it.
    """

    __slots__ = ("_rules_",)

    def __init__(self, rules: Iterable[MediaRule] | None = None) -> None:
        self._rules_: list[MediaRule] = list(rules or [])

    def add(self, rule: MediaRule):
        self._rules_.append(rule)

    def extend(self, rules: Iterable[MediaRule]):
        self._rules_.extend(rules)

    @property
    def rules(self) -> tuple[MediaRule, ...]:
        return tuple(self._rules_)

    @overload
    def __getitem__(self, key: int) -> MediaRule:
        ...

    @overload
    def __getitem__(self, key: slice) -> list[MediaRule]:
        ...

    def __getitem__(self, key: int | slice) -> MediaRule | list[MediaRule]:
        return self._rules_[key]

    def __iter__(self) -> Iterator[MediaRule]:
        yield from self._rules_

    def __len__(self) -> int:
        return len(self._rules_)

    def __repr__(self) -> str:
        return f"RuleStore({self._rules_!r})"

def admits(rule: MediaRule, width: float, rem: float = REM) -> bool:
    """Whether the rule applies at the given width.

    The lower bound is inclusive and the upper bound exclusive. A missing bound does not
    constrain its side.

    Raises
        MalformedWidthError: When a bound is not a valid number.
    """
    result = True
    if rule.min_width is not None:
        result &= width >= rule.min_width.pixels(rem)
    if rule.max_width is not None:
        result &= width < rule.max_width.pixels(rem)
    return result

def active_rules(store: Iterable[MediaRule], width: float, rem: float = REM) -> list[MediaRule]:
    """The rules of the store that apply at `width`, in store order."""
    return [rule for rule in store if admits(rule, width, rem)]
