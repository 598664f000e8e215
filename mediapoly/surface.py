from __future__ import annotations

from os import PathLike, get_terminal_size
from typing import Any, Protocol, runtime_checkable

from typing_extensions import TypeAliasType

__all__ = [
    "Size",
    "StylesheetHandle",
    "InlineStylesheet",
    "FileStylesheet",
    "Surface",
    "TerminalSurface",
]

Size = TypeAliasType("Size", tuple[float, float])

@runtime_checkable
class StylesheetHandle(Protocol):
    name: str | None

    def read(self) -> str:
        ...

class InlineStylesheet:
    """A stylesheet whose source text is held in memory."""

    def __init__(self, source: str, name: str | None = None) -> None:
        self.source = source
        self.name = name

    def read(self) -> str:
        return self.source

    def __repr__(self) -> str:
        return f"InlineStylesheet({self.name!r})"

class FileStylesheet:
    """A stylesheet read from a file each time `read` is called."""

    def __init__(self, path: str | PathLike[str], name: str | None = None) -> None:
        self.path = path
        self.name = name if name is not None else str(path)

    def read(self) -> str:
        """Read the file, decoding it with the `@charset` it declares or utf-8.

        Returns
            The source text without the `@charset` declaration.
        """
        with open(self.path, "rb") as file:
            if (charset := file.read(8)) == b"@charset":
                charset = b""
                while (byte := file.read(1)) not in (b";", b""):
                    charset += byte
                charset = charset.decode().strip().replace('"', "").lower()
                return file.read().decode(charset)
            return (charset + file.read()).decode()

    def __repr__(self) -> str:
        return f"FileStylesheet({str(self.path)!r})"

class Surface:
    """A sized container with an ordered collection of attached stylesheets.

    The first stylesheet is treated as the base stylesheet of the surface.

    Args
        width (float): The width of the surface.
        height (float): The height of the surface.
        stylesheets (list | None): Stylesheets attached from the start.
    """

    def __init__(
        self, width: float = 0, height: float = 0, stylesheets: list[Any] | None = None
    ) -> None:
        self._width_ = width
        self._height_ = height
        self._stylesheets_: list[Any] = list(stylesheets or [])

    @property
    def size(self) -> Size:
        """Current `(width, height)` of the surface."""
        return (self._width_, self._height_)

    @property
    def width(self) -> float:
        return self.size[0]

    @property
    def height(self) -> float:
        return self.size[1]

    @property
    def stylesheets(self) -> list[Any]:
        return self._stylesheets_

    def resize(self, width: float | None = None, height: float | None = None):
        """Resize the surface. Omit width or height to keep that dimension."""
        self._width_ = self._width_ if width is None else width
        self._height_ = self._height_ if height is None else height

    def find(self, name: str) -> Any | None:
        """First attached stylesheet with the given name."""
        for stylesheet in self._stylesheets_:
            if getattr(stylesheet, "name", None) == name:
                return stylesheet
        return None

    def attach(self, stylesheet: Any, name: str, non_editable: bool = True):
        """Name the stylesheet, flag it and append it to the attached stylesheets."""
        stylesheet.name = name
        stylesheet.non_editable = non_editable
        self._stylesheets_.append(stylesheet)

    def detach(self, name: str) -> int:
        """Remove every attached stylesheet with the given name.

        Returns
            The number of stylesheets removed.
        """
        count = len(self._stylesheets_)
        self._stylesheets_ = [
            stylesheet
            for stylesheet in self._stylesheets_
            if getattr(stylesheet, "name", None) != name
        ]
        return count - len(self._stylesheets_)

class TerminalSurface(Surface):
    """A surface sized by the terminal, in columns and lines.

    Args
        fallback (tuple[int, int]): Size used when stdout is not a terminal.
    """

    def __init__(
        self, stylesheets: list[Any] | None = None, fallback: tuple[int, int] = (80, 24)
    ) -> None:
        super().__init__(fallback[0], fallback[1], stylesheets)

    @property
    def size(self) -> Size:
        try:
            (cols, lines) = get_terminal_size()
        except OSError:
            return (self._width_, self._height_)
        return (cols, lines)
