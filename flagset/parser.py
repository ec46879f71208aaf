"""
Flagset token parser.

Scope
- Parser walks an argv-like token stream (program name already removed) and
  applies every flag it meets to the options of a FlagSet.
- It never touches the parsed gate nor the residual arguments of the FlagSet;
  it returns the positionals and lets FlagSet.parse() commit or roll back.

Scanning rules
- "--" alone is consumed and ends flag scanning.
- a token that does not start with '-', or a lone '-', ends flag scanning and
  is kept as the first positional.
- anything else is a flag: one or two dashes, a name, an optional "=value".
- names resolve as long keys first, then as short aliases; either dash count
  is accepted for either form.

Faults raised here
- UnrecognizedFlagError: malformed spelling or unknown name.
- MissingValueError: a valued option is the last token and has no inline value.
- InvalidValueError: raised by Option.set() on a malformed value.
- EmptyInlineValueWarning: triggered (not raised) for "--string-option=".
"""
import difflib
import functools
import re
from collections import deque

from .faults import *
from .options import Kind

# <dashes><name>[=<value>]; the name never starts with '-' or '=' and never holds '='
_TOKEN = re.compile(r"(?P<dashes>--?)(?P<name>[^=-][^=]*)(=(?P<value>.*))?", re.DOTALL)


@functools.cache
def _ordinal(number):
    """Return a human-friendly ordinal label for a 1-based position."""
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


class Parser:
    """
    Applies flag tokens to the options of one FlagSet.

    A parser is cheap and single-use in practice: FlagSet.parse() builds a new
    one per call. The index counts positions the way a shell user sees them,
    with the program name at position 0.
    """

    def __init__(self, flagset, /):
        self.flagset = flagset
        self._tokens = deque()
        self._index = 0

    def parse(self, tokens, /):
        """
        Consume flags from tokens and return the residual positionals.

        Option values are mutated in place as flags are met; on a fault the
        values already applied are left as they are, restoring them is the
        caller's job.
        """
        self._tokens = deque(tokens)
        self._index = 0

        while self._tokens:
            token = self._tokens[0]

            if token == "--":
                self._tokens.popleft()
                self._index += 1
                break

            if token == "-" or not token.startswith("-"):
                break

            self._tokens.popleft()
            self._index += 1
            self._apply(token)

        return list(self._tokens)

    def _resolve_token(self, token):
        """
        split a flag token into (option, name, value) and validate its shape.

        value is None when no '=' was present and '' for an empty inline value.
        """
        match = _TOKEN.fullmatch(token)

        if not match:
            raise UnrecognizedFlagError(
                "bad form of flag %r at %s position" % (token, _ordinal(self._index)),
                title="malformed flag",
                code=FaultCode.UNRECOGNIZED_FLAG,
                token=token,
                index=self._index,
                hint="flags are spelled -name, --name or --name=value",
            )

        name = match["name"]
        value = match["value"]

        if (option := self.flagset.lookup(name)) is None:
            names = []
            for known in self.flagset.options.values():
                names.extend((known.key, known.short))
            suggestions = difflib.get_close_matches(name, names, 5)
            try:
                hint = "did you mean %r?" % ("-" * len(match["dashes"]) + suggestions[0])
            except IndexError:
                hint = "check the usage text for the available flags"
            raise UnrecognizedFlagError(
                "unknown flag %r at %s position" % (token, _ordinal(self._index)),
                title="unknown flag",
                code=FaultCode.UNRECOGNIZED_FLAG,
                token=token,
                index=self._index,
                suggestions=suggestions,
                hint=hint,
            )

        return option, name, value

    def _apply(self, token):
        option, _, value = self._resolve_token(token)

        # booleans never take the next token; a lone flag means true
        if option.kind in (Kind.SWITCH, Kind.BOOL):
            option.set("true" if value is None else value)
            return

        if value is None:
            if not self._tokens:
                raise MissingValueError(
                    "%s option %r at %s position requires a value" % (
                        option.kind.name.lower(), token, _ordinal(self._index)
                    ),
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    key=option.key,
                    token=token,
                    index=self._index,
                    hint="pass a value after a space (%s <value>) or inline (%s=<value>)" % (token, token),
                )
            value = self._tokens.popleft()
            self._index += 1

        elif not value and option.kind is Kind.STRING:
            self.flagset.trigger(EmptyInlineValueWarning(
                "empty inline value for option %r at %s position" % (token, _ordinal(self._index)),
                title="empty inline value",
                code=FaultCode.EMPTY_INLINE_VALUE,
                key=option.key,
                token=token,
                index=self._index,
                hint="remove '=' and pass the value after a space, or quote an empty value on purpose",
            ))

        option.set(value)


__all__ = (
    "Parser",
)
