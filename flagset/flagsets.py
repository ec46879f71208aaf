"""
Flagset registry: the FlagSet class and the invoke() entry helper.

Overview
- FlagSet owns a mapping key -> Option, a parsed gate and the residual
  positionals left over by the last successful parse.
- Registration: register(kind, ...) and the add_<kind>() shorthands. Short
  aliases and keys share one namespace; collisions are refused.
- Parsing: parse(tokens) delegates to flagset.parser.Parser. It is
  transactional: on a fault every option value is put back as it was, the
  residual arguments and the gate are untouched, then the fault is triggered.
- Reading: get(key, kind) and the get_<kind>() shorthands are gated on a
  successful parse; lookup(), usage() and arguments() are not.
- Faults: every user-facing problem goes through FlagSet.trigger(), which adds
  the runtime options (tool, shell, fancy, colorful) and either hands the
  fault to a registered fallback or raises / warns / prints it.

Runtime options
- shell: print faults with rich on stderr (preceded by the usage text for
  parse faults) and exit with status 1 instead of raising.
- fancy: wrap shell output in a panel.
- colorful: style shell output; when False it is printed as plain text.

Quick example:
    >>> flags = FlagSet("util", "utility", description="Utility that does stuff")
    >>> flags.add_int("line", "l", "Start counting at `line_number`", 1)
    int-option(key='line', short='l', kind=<Kind.INT: 2>, value=1, default=1, usage='Start counting at `line_number`')
    >>> flags.parse(["util", "--line", "4", "rest"])
    >>> flags.get_int("line"), flags.arguments()
    (4, ['rest'])
"""
import shlex
import sys
from collections.abc import Iterable
from types import MappingProxyType

from .faults import *
from .faults import console
from .options import *
from .parser import Parser
from .usage import render, stylize
from .utils import *

_PARSE_FAULTS = (UnrecognizedFlagError, MissingValueError, InvalidValueError)


class FlagSet:
    """
    Registry of named, typed options plus the state of one parse.

    Construction
    - *names: display names joined with '|' (e.g. "util|utility"); may be empty.
    - description: optional one-line text printed above the usage summary.
    - shell, fancy, colorful: runtime options (see module docstring).

    Properties
    - name, description (settable), options (read-only view), parsed,
      shell, fancy, colorful.
    """

    __introspectable__ = (
        "name",
        "description",
        "options",
        "parsed",
        "shell",
        "fancy",
        "colorful",
    )

    name = mirror("name")
    parsed = mirror("parsed")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __new__(cls, *names, description=Unset, shell=False, fancy=False, colorful=True):
        for name in names:
            if not isinstance(name, str):
                raise TypeError(f"{cls.__name__} names must be strings")

        self = super().__new__(cls)
        self._name = "|".join(names)
        self._options = {}
        self._parsed = False
        self._residual = []
        self._fallback = Unset
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self.description = coalesce(description)
        return self

    @property
    def description(self):
        return self._description

    @description.setter
    def description(self, description):
        if description is not None and not isinstance(description, str):
            raise TypeError(f"{type(self).__name__} description must be a string or None")
        self._description = description

    @property
    def options(self):
        return MappingProxyType(self._options)

    def __repr__(self):
        return f"{type(self).__name__}({', '.join('%s=%r' % pair for pair in self.__rich_repr__())})"

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    # Registration

    def register(self, kind, key, short, usage, default=Unset):
        """
        Create the option for kind and store it under its key, replacing any
        option already registered with the same key.

        Returns the new option.

        Raises
        - TypeError / ValueError: on malformed names, usage or default (see Option).
        - NameCollisionError: when the short alias or the key is already used as
          a name by another option.
        """
        option = Option.variant(kind)(key, short, usage, default)

        for other in self._options.values():
            # the option being replaced does not count
            if other.key == option.key:
                continue
            if option.short in (other.key, other.short):
                name = option.short
            elif option.key == other.short:
                name = option.key
            else:
                continue
            return self.trigger(NameCollisionError(
                "flag name %r of option %r is already used by option %r" % (name, option.key, other.key),
                title="name collision",
                code=FaultCode.NAME_COLLISION,
                key=option.key,
                name=name,
                owner=other.key,
                hint="pick another short alias or key for %r" % option.key,
            ))

        self._options[option.key] = option
        return option

    def add_switch(self, key, short, usage):
        return self.register(Kind.SWITCH, key, short, usage)

    def add_bool(self, key, short, usage, default):
        return self.register(Kind.BOOL, key, short, usage, default)

    def add_int(self, key, short, usage, default):
        return self.register(Kind.INT, key, short, usage, default)

    def add_float(self, key, short, usage, default):
        return self.register(Kind.FLOAT, key, short, usage, default)

    def add_string(self, key, short, usage, default):
        return self.register(Kind.STRING, key, short, usage, default)

    # Lookup and typed access

    def lookup(self, name, /):
        """
        Resolve a long key or a short alias to its option, or None.

        Keys take precedence over aliases. Not gated on parsing.
        """
        try:
            return self._options[name]
        except KeyError:
            pass
        for option in self._options.values():
            if option.short == name:
                return option
        return None

    def get(self, key, kind, /):
        """
        Return the current value of the option at key, checked against kind.

        Raises, in this order
        - NotParsedError: parse() has not succeeded yet.
        - UnknownFlagError: no option is registered under key.
        - TypeMismatchError: the option has another kind.
        """
        kind = Kind(kind)

        if not self._parsed:
            return self.trigger(NotParsedError(
                "flag set %r has not been parsed yet" % self._name,
                title="not parsed",
                code=FaultCode.NOT_PARSED,
                name=self._name,
                hint="call parse() before reading option values",
            ))

        if (option := self._options.get(key)) is None:
            return self.trigger(UnknownFlagError(
                "no option registered under key %r" % key,
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                key=key,
                hint="keys are the long names given at registration",
            ))

        if option.kind is not kind:
            return self.trigger(TypeMismatchError(
                "option %r holds a %s value, not a %s value" % (key, option.kind.name.lower(), kind.name.lower()),
                title="type mismatch",
                code=FaultCode.TYPE_MISMATCH,
                key=key,
                expected=kind,
                actual=option.kind,
                hint="use get_%s() for this option" % option.kind.name.lower(),
            ))

        return option.value

    def get_switch(self, key):
        return self.get(key, Kind.SWITCH)

    def get_bool(self, key):
        return self.get(key, Kind.BOOL)

    def get_int(self, key):
        return self.get(key, Kind.INT)

    def get_float(self, key):
        return self.get(key, Kind.FLOAT)

    def get_string(self, key):
        return self.get(key, Kind.STRING)

    def arguments(self):
        """Return a copy of the positionals left over by the last successful parse."""
        return list(self._residual)

    def simulate(self, name, raw, /):
        """
        Set an option value as if it had been parsed from the command line.

        Meant for tests: name is a long key or a short alias, raw goes through
        the same coercion as parsing. The parsed gate is left unchanged.
        Returns the stored value.
        """
        if (option := self.lookup(name)) is None:
            return self.trigger(UnknownFlagError(
                "no option registered under key or alias %r" % name,
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                key=name,
                hint="keys and short aliases are the names given at registration",
            ))
        try:
            return option.set(raw)
        except InvalidValueError as error:
            return self.trigger(error)

    # Parsing

    def parse(self, tokens, /):
        """
        Parse argv-like tokens into the registered options.

        The first token is the program name and is skipped. On success the
        parsed gate is set and the positionals are kept for arguments(). On a
        fault, option values are restored to what they were before the call,
        the residual arguments and the gate keep their previous state, and the
        fault is triggered.

        Raises
        - TypeError: when tokens is a string or holds a non-string item.
        - UnrecognizedFlagError, MissingValueError, InvalidValueError.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError(f"{type(self).__name__}.parse() argument must be an iterable of strings")
        tokens = list(tokens)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError(f"{type(self).__name__}.parse() argument must be an iterable of strings")

        snapshot = {key: option.value for key, option in self._options.items()}
        try:
            residual = Parser(self).parse(tokens[1:])
        except BaseException as error:
            for key, value in snapshot.items():
                self._options[key]._value = value
            if not isinstance(error, FlagSetException):
                raise
            return self.trigger(error)

        self._residual = residual
        self._parsed = True

    def usage(self):
        """Return the usage text (description, summary line and option list)."""
        return render(self)

    # Faults

    def fallback(self, fallback, /):
        """
        Register a one-time fault handler.

        The callable receives every fault (errors and warnings) in place of the
        default raise / warn / print behaviour. It can be set once per flag set.
        Returns the same callable, so it can be used as a decorator.
        """
        if not callable(fallback):
            raise TypeError(f"{type(self).__name__} fallback must be callable")
        if self._fallback is not Unset:
            raise TypeError(f"{type(self).__name__} fallback cannot be overridden")
        self._fallback = fallback
        return fallback

    def trigger(self, fault, /, **options):
        if (
                not hasattr(fault, "__trigger__") or
                not callable(fault.__trigger__) or
                not hasattr(fault, "__replace__") or
                not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        fault = fault.__replace__(**{
            **options,
            "tool": self,
            "shell": self._shell,
            "fancy": self._fancy,
            "colorful": self._colorful,
        })
        if self._shell and isinstance(fault, _PARSE_FAULTS):
            console.print(stylize(self.usage(), colorful=self._colorful))
        if self._fallback:
            self._fallback(fault)
        else:
            trigger(fault)


def invoke(flagset, prompt=Unset, /):
    """
    Parse a flag set from the process arguments or an explicit prompt.

    Parameters
    - flagset: the FlagSet to parse into.
    - prompt:
      • Unset: read sys.argv (program name included).
      • str: shell-like command line, split with shlex.split.
      • Iterable[str]: tokens used as they are (program name first).

    Returns
    - the residual positionals (flagset.arguments()).

    Raises
    - TypeError: when flagset is not a FlagSet or the prompt has a bad type.
    """
    if not isinstance(flagset, FlagSet):
        raise TypeError("invoke() first argument must be a FlagSet")

    if prompt is Unset:
        tokens = list(sys.argv)
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
    else:
        raise TypeError("invoke() argument must be a string or an iterable of strings")

    flagset.parse(tokens)
    return flagset.arguments()


__all__ = (
    "FlagSet",
    "invoke",
)
