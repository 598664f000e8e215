""" Stylesheet block scanning

Splits stylesheet text into `<prelude> { <body> }` blocks by counting brackets.

<stylesheet>
    <prelude/> { <body/> }
    <statement/>;
</stylesheet>

prelude => selector or at-rule text before the opening `{`,
body => everything between the matching brackets, nested blocks included,
statement => at-rules without a block, e.g. `@import "base.css";`. These are skipped.

The depth of a block is the deepest bracket nesting found inside its body. Blocks
deeper than `max_depth` are skipped and reported through `Scanner.errors`.
"""

from __future__ import annotations
from dataclasses import dataclass
import re
from typing import Iterator

__all__ = ["Block", "Scanner", "ParseError", "strip_comments"]

COMMENT = re.compile(r"/\*[\s\S]*?\*/")
RETURNS = re.compile("\r\n|\f|\r")

class ParseError(Exception): pass

def strip_comments(source: str) -> str:
    """Remove every `/* ... */` comment from the source."""
    return COMMENT.sub("", source)

@dataclass(frozen=True)
class Block:
    prelude: str
    body: str
    depth: int
    line: int
    column: int

class Scanner:
    """Bracket counting scanner over stylesheet text.

    Args
        source (str): Stylesheet text. Comments are expected to be stripped already.
        max_depth (int): Deepest nesting allowed inside a block body. Defaults to `1`
            which allows selector blocks inside an at-rule block.
    """

    def __init__(self, source: str, max_depth: int = 1) -> None:
        self.source = RETURNS.sub("\n", source)
        self.max_depth = max_depth
        self.index = 0
        self.pos = [1, 1]
        self.errors: list[ParseError] = []

    def __iter__(self) -> Iterator[Block]:
        return self.blocks()

    def peek(self) -> str | None:
        """The next code point."""
        if self.index < len(self.source):
            return self.source[self.index]
        return None

    def next(self) -> str | None:
        current = self.peek()
        if current is not None:
            self.index += 1
            if current == "\n":
                self.pos = [self.pos[0] + 1, 1]
            else:
                self.pos[1] += 1
        return current

    def error(self, message: str, line: int, column: int):
        self.errors.append(ParseError(f"{message} ({line}:{column})"))

    def _consume_whitespace_(self):
        while (peek := self.peek()) is not None and peek.isspace():
            self.next()

    def _consume_block_(self) -> tuple[str, int, bool]:
        """Consume code points up to the bracket closing the current block.

        Returns
            The body text, the deepest nesting found in it, and whether the block was closed.
        """
        body = ""
        level = 0
        deepest = 0
        while (current := self.next()) is not None:
            if current == "{":
                level += 1
                deepest = max(deepest, level)
            elif current == "}":
                if level == 0:
                    return body, deepest, True
                level -= 1
            body += current
        return body, deepest, False

    def blocks(self) -> Iterator[Block]:
        """Yield every top level block in source order."""
        while True:
            self._consume_whitespace_()
            line, column = self.pos

            prelude = ""
            while (current := self.next()) is not None and current not in "{};":
                prelude += current

            if current is None:
                if prelude.strip() != "":
                    self.error("Expected a block after prelude", line, column)
                return
            elif current == ";":
                continue
            elif current == "}":
                self.error("Unexpected closing bracket", *self.pos)
                continue

            body, depth, closed = self._consume_block_()
            if not closed:
                self.error("Block was not closed", line, column)
                return
            if depth > self.max_depth:
                self.error(
                    f"Block is nested {depth} levels deep, only {self.max_depth} supported",
                    line,
                    column,
                )
                continue
            yield Block(prelude.strip(), body.strip(), depth, line, column)
