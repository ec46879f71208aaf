r"""
Flagset option specifications.

Overview
- Kind: closed tag over the five supported value kinds (SWITCH, BOOL, INT, FLOAT, STRING).
- Option: abstract, named, typed setting with a long key, a short alias, a default,
  a current value and usage text. It is a closed tagged union: the only concrete
  classes are the five sealed variants below, each holding a natively typed value.
  • SwitchOption: presence-only boolean, always defaults to False.
  • BoolOption: boolean accepting an explicit true/false literal.
  • IntOption: signed 64-bit integer, base-10 literals.
  • FloatOption: IEEE-754 double.
  • StringOption: verbatim text.

- Introspection & representation
  • OptionType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields declared in __introspectable__ via read-only properties.

Metadata (sanitized on construction)
- key/short: non-empty strings matching r"[^\s=-][^\s=]*" (no leading dash, no '=').
- usage: string, may embed one back-quoted metavariable (see flagset.usage).
- default: natively typed per variant; SWITCH ignores it and uses False.

Coercion
- Option.set(raw) is the single conversion path from a command-line string to
  the variant's value. It is shared by the parser and FlagSet.simulate, and
  raises InvalidValueError(key, token) on malformed input.

Quick example:
    >>> from flagset.options import Kind, Option
    >>> line = Option.variant(Kind.INT)("line", "l", "Start counting at `line_number`", 1)
    >>> line.set("4")
    4
"""
import functools
import math
import operator
import re
from enum import IntEnum

from .faults import FaultCode, InvalidValueError
from .utils import *

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class Kind(IntEnum):
    """
    closed set of option value kinds.

    the numeric order is part of the public surface (SWITCH is 0) and
    must not be reshuffled.
    """
    SWITCH = 0
    BOOL = 1
    INT = 2
    FLOAT = 3
    STRING = 4


_TRUTHY = frozenset({"1", "t", "true"})
_FALSY = frozenset({"0", "f", "false"})


def _parse_bool(raw, /):
    if (lowered := raw.lower()) in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"invalid boolean literal {raw!r}")


def _parse_int(raw, /):
    # int() alone would accept whitespace, underscores and non-ascii digits
    if not re.fullmatch(r"[+-]?[0-9]+", raw):
        raise ValueError(f"invalid base-10 integer {raw!r}")
    if not INT64_MIN <= (value := int(raw, 10)) <= INT64_MAX:
        raise ValueError(f"integer {raw!r} out of 64-bit range")
    return value


# ascii only; signed inf/infinity, unsigned nan
_FLOAT = re.compile(r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity)|nan", re.IGNORECASE)


def _parse_float(raw, /):
    if not _FLOAT.fullmatch(raw):
        raise ValueError(f"invalid floating point literal {raw!r}")
    if math.isinf(value := float(raw)) and raw.lstrip("+-").lower() not in ("inf", "infinity"):
        raise ValueError(f"floating point literal {raw!r} out of range")
    return value


class OptionType(type):
    """
    Metaclass that turns option variants into introspectable, sealed types.

    Responsibilities
    - Expose the names listed in __introspectable__ as read-only properties
      backed by "_<name>" attributes (see mirror()).
    - Provide stable, readable __repr__/__rich_repr__ implementations.
    - Seal variant classes created with `sealed=True` against subclassing.

    Conventions
    - __typename__ is derived from the class name (camel-case split with
      hyphens) and used in messages, e.g. "int-option".
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate the long key and the short alias.

    Both must be strings, non-empty after trimming, must not start with a dash
    and must not contain '=' or whitespace; the parser relies on these rules to
    split "--key=value" tokens unambiguously.

    Raises
    - TypeError: when a name is not a string.
    - ValueError: when a name is empty or malformed.
    """
    for field in ("key", "short"):
        if not isinstance(name := metadata[field], str):
            raise TypeError(f"{cls.__typename__} '{field}' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} '{field}' cannot be empty")
        elif not re.fullmatch(r"[^\s=-][^\s=]*", name):
            raise ValueError(f"{cls.__typename__} '{field}' must not start with '-' nor contain '=' or spaces")
        metadata[field] = name


def _sanitize_usage(cls, metadata, /):
    if not isinstance(metadata["usage"], str):
        raise TypeError(f"{cls.__typename__} 'usage' must be a string")


class Option(metaclass=OptionType):
    """
    Named, typed option specification (abstract).

    Instances are created through one of the sealed variants, usually picked
    with Option.variant(kind). The key, alias, kind, default and usage never
    change after construction; the current value starts equal to the default
    and changes only through set().

    Properties
    - key, short, kind, value, default, usage (read-only).
    """

    __introspectable__ = (
        "key",
        "short",
        "kind",
        "value",
        "default",
        "usage",
    )

    _hint = "check the expected value type in the usage text"

    def __new__(cls, key, short, usage="", default=Unset):
        """
        Construct an option with sanitized metadata.

        Parameters
        - key: str, canonical long name.
        - short: str, short command-line alias.
        - usage: str, help text (may embed one `back-quoted` metavariable).
        - default: variant-typed default; ignored by SwitchOption.

        Raises
        - TypeError: when instantiating Option itself, or on badly typed metadata.
        - ValueError: on malformed names or out-of-range defaults.
        """
        if cls is Option:
            raise TypeError("Option is abstract; use Option.variant(kind) to pick a concrete option type")

        metadata = {
            "key": key,
            "short": short,
            "usage": usage,
            "default": default,
        }
        _sanitize_names(cls, metadata)
        _sanitize_usage(cls, metadata)
        metadata["default"] = cls._accept(metadata["default"])

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._value = self._default
        return self

    @classmethod
    def variant(cls, kind, /):
        """
        Return the sealed option class for the given Kind (or its integer value).
        """
        return _VARIANTS[Kind(kind)]

    @classmethod
    def _accept(cls, default, /):
        raise NotImplementedError

    @staticmethod
    def _coerce(raw, /):
        raise NotImplementedError

    def set(self, raw, /):
        """
        Coerce a raw command-line string and store it as the current value.

        Returns the stored, natively typed value.

        Raises
        - TypeError: when raw is not a string.
        - InvalidValueError: when raw cannot be coerced to this option's kind.
        """
        if not isinstance(raw, str):
            raise TypeError(f"{type(self).__typename__} raw value must be a string")
        try:
            self._value = self._coerce(raw)
        except ValueError:
            raise InvalidValueError(
                "invalid value %r for %s option %r" % (raw, self.kind.name.lower(), self.key),
                title="invalid value",
                code=FaultCode.INVALID_VALUE,
                key=self.key,
                token=raw,
                hint=self._hint,
            ) from None
        return self._value


class SwitchOption(Option, sealed=True):
    """Presence-only boolean; false unless its flag appears."""
    _kind = Kind.SWITCH
    _hint = "pass the flag alone, or one of 1, t, true, 0, f, false after '='"
    _coerce = staticmethod(_parse_bool)

    @classmethod
    def _accept(cls, default, /):
        return False


class BoolOption(Option, sealed=True):
    _kind = Kind.BOOL
    _hint = "use one of 1, t, true, 0, f, false (case-insensitive)"
    _coerce = staticmethod(_parse_bool)

    @classmethod
    def _accept(cls, default, /):
        if not isinstance(default, bool):
            raise TypeError(f"{cls.__typename__} 'default' must be a boolean")
        return default


class IntOption(Option, sealed=True):
    _kind = Kind.INT
    _hint = "use a base-10 integer such as 42 or -7"
    _coerce = staticmethod(_parse_int)

    @classmethod
    def _accept(cls, default, /):
        if not isinstance(default, int) or isinstance(default, bool):
            raise TypeError(f"{cls.__typename__} 'default' must be an integer")
        if not INT64_MIN <= default <= INT64_MAX:
            raise ValueError(f"{cls.__typename__} 'default' must fit in a signed 64-bit integer")
        return default


class FloatOption(Option, sealed=True):
    _kind = Kind.FLOAT
    _hint = "use a decimal number such as 2.5 or 1e-3"
    _coerce = staticmethod(_parse_float)

    @classmethod
    def _accept(cls, default, /):
        if not isinstance(default, int | float) or isinstance(default, bool):
            raise TypeError(f"{cls.__typename__} 'default' must be a number")
        return float(default)


class StringOption(Option, sealed=True):
    _kind = Kind.STRING
    _coerce = staticmethod(str)

    @classmethod
    def _accept(cls, default, /):
        if not isinstance(default, str):
            raise TypeError(f"{cls.__typename__} 'default' must be a string")
        return default


_VARIANTS = {
    Kind.SWITCH: SwitchOption,
    Kind.BOOL: BoolOption,
    Kind.INT: IntOption,
    Kind.FLOAT: FloatOption,
    Kind.STRING: StringOption,
}


__all__ = (
    # Tags
    "Kind",

    # Classes (specifications)
    "Option",
    "SwitchOption",
    "BoolOption",
    "IntOption",
    "FloatOption",
    "StringOption",
)

# Not part of the public API.
del OptionType
