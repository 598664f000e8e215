"""min-width/max-width media queries for any sized surface.

+ Parse:
    - `@media` blocks of every non-base stylesheet attached to a surface
    - Comma separated condition lists become one rule per branch
+ React:
    - Call `MediaQuery.on_update(surface)` on every host tick
    - The active rule bodies are merged into one generated stylesheet once the size settles
"""
__version__ = "0.1.0"

from mediapoly.config import DEFAULTS, OptionalOptions, Options, default_options
from mediapoly.css import CompileError, CSSCompiler, Dimension, MalformedWidthError, MediaRule, extract_rules
from mediapoly.reactor import MediaQuery, State, StylesheetCompiler
from mediapoly.rules import RuleStore, active_rules, admits
from mediapoly.surface import FileStylesheet, InlineStylesheet, Surface, TerminalSurface

__all__ = [
    "DEFAULTS",
    "OptionalOptions",
    "Options",
    "default_options",
    "CompileError",
    "CSSCompiler",
    "Dimension",
    "MalformedWidthError",
    "MediaRule",
    "extract_rules",
    "MediaQuery",
    "State",
    "StylesheetCompiler",
    "RuleStore",
    "active_rules",
    "admits",
    "FileStylesheet",
    "InlineStylesheet",
    "Surface",
    "TerminalSurface",
]
