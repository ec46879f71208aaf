"""
Flagset faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain so logs and searches stay predictable.
- FlagSetException / FlagSetWarning: base types that carry a message plus a
  read-only options mapping (the structured fields of the fault) and know how to
  render themselves through rich.
- trigger(): central entry point to surface any fault (raise, warn, or print in
  shell mode).

Fields
- Every keyword given to a fault is kept in `fault.options` and is also readable
  as an attribute, so `error.key` and `error.options["key"]` are equivalent.

Integration
- FlagSet routes every fault through FlagSet.trigger(), which merges its runtime
  options (tool, shell, fancy, colorful) before calling trigger().
- In non-shell mode exceptions are raised and warnings go through warnings.warn;
  in shell mode both are printed to stderr with rich, and errors exit the process.
"""
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - registry (111xx)
      • NOT_PARSED, UNKNOWN_FLAG, TYPE_MISMATCH, NAME_COLLISION
    - parsing (1112x)
      • UNRECOGNIZED_FLAG, MISSING_VALUE, INVALID_VALUE
    - warnings (12xxx)
      • EMPTY_INLINE_VALUE

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- registry errors (111xx) ---
    NOT_PARSED                  = 11101
    UNKNOWN_FLAG                = 11102
    TYPE_MISMATCH               = 11103
    NAME_COLLISION              = 11104

    # --- parsing errors (1112x) ---
    UNRECOGNIZED_FLAG           = 11121
    MISSING_VALUE               = 11122
    INVALID_VALUE               = 11123

    # --- warnings (12xxx) ---
    EMPTY_INLINE_VALUE          = 12121

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    build the rich renderable shared by errors and warnings.

    layout
    - header: "[ <prog> — <code> | <Title> ]"
    - body: the message, then " → <hint>" when a hint is present.
    - fancy: header becomes the title of a Panel wrapping the body.

    the program name comes from __prog__ in __main__, then from the "tool" option
    (the FlagSet), then falls back to "flagset". colours come from the palette,
    overridable by a __styles__ mapping in __main__.
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), style)

    tool = options.get("tool")
    prog = getattr(main, "__prog__", None) or getattr(tool, "name", None) or "flagset"
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        text(prog, styler("prog-name")),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
        " | ",
        text(str(options.get("title", type(fault).__name__)).title(), styler("title")),
        " ]"
    )
    message = text(fault.message, styler("message"))
    hint = options.get("hint")

    body = [message]
    if hint:
        body.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


class FlagSetException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str) or message is Unset
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name, /):
        if name == "options" or name.startswith("__"):
            raise AttributeError(name)
        try:
            return self.options[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} has no field {name!r}") from None

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NotParsedError(FlagSetException): ...
class UnknownFlagError(FlagSetException): ...
class TypeMismatchError(FlagSetException): ...
class NameCollisionError(FlagSetException): ...
class UnrecognizedFlagError(FlagSetException): ...
class MissingValueError(FlagSetException): ...
class InvalidValueError(FlagSetException): ...


class FlagSetWarning(ABC, Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str) or message is Unset
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name, /):
        if name == "options" or name.startswith("__"):
            raise AttributeError(name)
        try:
            return self.options[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} has no field {name!r}") from None

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyInlineValueWarning(FlagSetWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise exceptions
      are raised and warnings are emitted.

    typical options
    - tool, shell, fancy, colorful, title, code, hint, and any structured field
      the fault carries (key, token, expected, actual, ...).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FlagSetException",
    "NotParsedError",
    "UnknownFlagError",
    "TypeMismatchError",
    "NameCollisionError",
    "UnrecognizedFlagError",
    "MissingValueError",
    "InvalidValueError",
    "FlagSetWarning",
    "EmptyInlineValueWarning",
    "FaultCode",
    "trigger",
)
