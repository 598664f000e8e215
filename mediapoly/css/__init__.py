"""
References:
    - [@media](https://developer.mozilla.org/en-US/docs/Web/CSS/@media)
    - [media features](https://developer.mozilla.org/en-US/docs/Web/CSS/@media#media_features)
    - [basics](https://developer.mozilla.org/en-US/docs/Learn/CSS/First_steps/How_CSS_is_structured)

<comment></comment>
<at-rule>
    @media <condition/>, <condition/> {
        <ruleset/>
    }
</at-rule>

condition => (min-width: <dimension/>), (max-width: <dimension/>), ...,
dimension => <number/>px or <number/>rem,
ruleset => selector block copied verbatim into the generated stylesheet,
"""
from mediapoly.css.compiler import CompileError, CSSCompiler, Stylesheet, compile_stylesheet
from mediapoly.css.media import Dimension, MalformedWidthError, MediaRule, extract_rules, parse_width
from mediapoly.css.scanner import ParseError, Scanner, strip_comments

__all__ = [
    "CompileError",
    "CSSCompiler",
    "Stylesheet",
    "compile_stylesheet",
    "Dimension",
    "MalformedWidthError",
    "MediaRule",
    "extract_rules",
    "parse_width",
    "ParseError",
    "Scanner",
    "strip_comments",
]
