""" Stylesheet compiler
https://www.w3.org/TR/css-syntax-3/#parsing

Compiles flat stylesheet text into a `Stylesheet` object:

<stylesheet>
    <selector/> {
        <property/>: <value/> [!important];
    }
</stylesheet>

Nested blocks are not supported by the compiler.
"""

from __future__ import annotations
import re

from mediapoly.css.scanner import Scanner, strip_comments

__all__ = [
    "Declaration",
    "Rule",
    "Stylesheet",
    "CSSCompiler",
    "CompileError",
    "NotAllowedError",
    "compile_stylesheet",
    "parse_declarations",
]

IMPORTANT = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)

class CompileError(Exception): pass
class NotAllowedError(Exception): pass

class Declaration:
    important: bool
    name: str
    value: str
    def __init__(self, name: str, value: str, important: bool = False):
        self.name = name
        self.value = value
        self.important = important

    def __eq__(self, __value: object) -> bool:
        if isinstance(__value, Declaration):
            return (
                self.name == __value.name
                and self.value == __value.value
                and self.important == __value.important
            )
        return False

    def __repr__(self) -> str:
        return f"Decl({'!, ' if self.important else ''}{self.name!r}, {self.value!r})"

    def __str__(self) -> str:
        return f"{self.name}: {self.value}{' !important' if self.important else ''};"

class Rule:
    selector: str
    declarations: list[Declaration]
    def __init__(self, selector: str, declarations: list[Declaration] | None = None) -> None:
        self.selector = selector
        self.declarations = declarations or []

    def __repr__(self) -> str:
        return f"Rule({self.selector!r}, {self.declarations})"

    def __str__(self) -> str:
        return f"{self.selector} {{ {' '.join(str(decl) for decl in self.declarations)} }}"

class Stylesheet:
    """A compiled stylesheet that can be attached to a surface.

    Args
        source (str): The text the stylesheet was compiled from.
        name (str | None): Name used to find the stylesheet on a surface.
        non_editable (bool): Reject `insert_rule` and `delete_rule` when set.
    """

    def __init__(
        self,
        source: str = "",
        rules: list[Rule] | None = None,
        *,
        name: str | None = None,
        non_editable: bool = False,
    ) -> None:
        self.source = source
        self.name = name
        self.non_editable = non_editable
        self._css_rules_ = rules or []

    @property
    def css_rules(self) -> list[Rule]:
        return self._css_rules_

    def insert_rule(self, rule: str, index: int | None = None) -> int:
        if self.non_editable:
            raise NotAllowedError(f"Stylesheet {self.name!r} is not editable")

        rules = compile_stylesheet(rule).css_rules
        if len(rules) != 1:
            raise CompileError(f"Expected exactly one rule, found {len(rules)}")

        index = len(self._css_rules_) if index is None else index
        self._css_rules_.insert(index, rules[0])
        return index

    def delete_rule(self, index: int):
        if self.non_editable:
            raise NotAllowedError(f"Stylesheet {self.name!r} is not editable")
        self._css_rules_.pop(index)

    def read(self) -> str:
        return self.source

    def __repr__(self) -> str:
        sep = "\n  "
        return f"""Stylesheet({self.name!r},
  {sep.join(repr(rule) for rule in self.css_rules)}
)"""

def parse_declarations(text: str) -> list[Declaration]:
    """Parse the `;` separated declarations of a block body."""
    decls = []
    for part in text.split(";"):
        item = part.strip()
        if item == "":
            continue

        name, colon, value = item.partition(":")
        if colon == "" or name.strip() == "":
            raise CompileError(f"Invalid declaration {item!r}")

        value, important = IMPORTANT.subn("", value)
        decls.append(Declaration(name.strip(), value.strip(), important > 0))
    return decls

def compile_stylesheet(source: str) -> Stylesheet:
    """Compile flat stylesheet text into a `Stylesheet`.

    Raises
        CompileError: When a block is unbalanced, nested, or holds an invalid declaration.
    """
    scanner = Scanner(strip_comments(source), max_depth=0)
    rules = [Rule(block.prelude, parse_declarations(block.body)) for block in scanner]
    if len(scanner.errors) > 0:
        raise CompileError(str(scanner.errors[0]))
    return Stylesheet(source, rules)

class CSSCompiler:
    """Default stylesheet compiler used by `MediaQuery`."""

    def compile(self, source: str) -> Stylesheet:
        return compile_stylesheet(source)
