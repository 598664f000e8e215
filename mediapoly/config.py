from __future__ import annotations
from typing import TypedDict

__all__ = ["Options", "OptionalOptions", "DEFAULTS", "REM", "GENERATED_NAME", "default_options"]

REM = 12.0
"""Pixels per `rem` when a bound is converted at match time."""

GENERATED_NAME = "mediapoly.MediaQuery.Generated.css"

class Options(TypedDict):
    rem: float
    generated_name: str
    base_stylesheets: int
    interval: float

class OptionalOptions(TypedDict, total=False):
    rem: float
    generated_name: str
    base_stylesheets: int
    interval: float

DEFAULTS: Options = {
    "rem": REM,
    "generated_name": GENERATED_NAME,
    "base_stylesheets": 1,
    "interval": 0.1,
}

def default_options(origin: OptionalOptions | dict | None = None) -> Options:
    """Fill in every option missing from `origin` with its default.

    Args
        origin (OptionalOptions | dict | None): User supplied options. Left unchanged.

    Returns
        A new dict with every key of `Options` present.
    """
    options = dict(origin or {})
    for key, value in DEFAULTS.items():
        options[key] = options.get(key, value)
    return options
