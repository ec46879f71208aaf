"""
Usage text renderer.

Layout (byte-stable, used by snapshot tests)

    <description>
    Usage:
      <name> [-<short> <metavar>|<short>|...]
    Options:
      -<short>, --<key> <metavar>
         <help> (default=<value>)

- the description line is present only when a description is set.
- the bracketed summary and the Options section are present only when options exist.
- options are sorted by key (code-point order), in both the summary and the list.
- the metavariable is the first `back-quoted` word of the usage text, or the kind
  name (bool/int/float/string) when there is none; switches have no kind name.
- the default suffix is omitted for switches and for empty string defaults.
- no trailing newline.

stylize() turns the plain text into a rich Text for shell-mode output; it never
changes the characters, only their styles.
"""
import decimal
import math
from collections import defaultdict

from rich.text import Text

from .options import Kind

_METAVARS = {
    Kind.BOOL: "bool",
    Kind.INT: "int",
    Kind.FLOAT: "float",
    Kind.STRING: "string",
}


def sort_options(options, /):
    """return the options as a list in ascending key order."""
    return sorted(options, key=lambda option: option.key)


def unquote(option, /):
    """
    extract the metavariable from an option's usage text.

    returns (metavar, usage) where usage has the back-quotes of the first
    back-quoted pair removed. with a single back-quote or none, the metavar is
    derived from the option kind and usage is returned unchanged. the option
    itself is never modified.
    """
    usage = option.usage
    if (start := usage.find("`")) != -1 and (end := usage.find("`", start + 1)) != -1:
        name = usage[start + 1:end]
        return name, usage[:start] + name + usage[end + 1:]
    return _METAVARS.get(option.kind, ""), usage


def _format_float(value, /):
    """
    shortest round-trip rendering in %g style.

    exponent notation is used when the decimal exponent is below -4 or at
    least 6 (1e+06, 1.5e-05); otherwise plain decimals without trailing zeros.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    number = decimal.Decimal(repr(value)).normalize()
    sign, digits, exponent = number.as_tuple()
    scale = len(digits) + exponent - 1

    if scale < -4 or scale >= 6:
        mantissa = str(digits[0])
        if len(digits) > 1:
            mantissa += "." + "".join(map(str, digits[1:]))
        return "%s%se%s%02d" % ("-" if sign else "", mantissa, "-" if scale < 0 else "+", abs(scale))
    return format(number, "f")


def format_default(option, /):
    """return the ' (default=...)' suffix for an option, or '' when it has none."""
    default = option.default
    match option.kind:
        case Kind.BOOL:
            return " (default=%s)" % ("true" if default else "false")
        case Kind.INT:
            return " (default=%d)" % default
        case Kind.FLOAT:
            return " (default=%s)" % _format_float(default)
        case Kind.STRING if default:
            return " (default=%s)" % default
    return ""


def render_option(option, /):
    metavar, usage = unquote(option)
    line = "\n  -%s, --%s" % (option.short, option.key)
    if metavar:
        line += " " + metavar
    return line + "\n     " + usage + format_default(option)


def render(flagset, /):
    """
    render the full usage text of a flag set (description, summary, options).

    reads only registry state: it is valid before parsing and renders the
    registered defaults, not the current values.
    """
    text = ""
    if flagset.description:
        text += flagset.description + "\n"

    text += "Usage:\n  " + flagset.name

    if options := sort_options(flagset.options.values()):
        summary = []
        for option in options:
            metavar, _ = unquote(option)
            summary.append(option.short + (" " + metavar if metavar else ""))
        text += " [-" + "|".join(summary) + "]"

        text += "\nOptions:"
        for option in options:
            text += render_option(option)

    return text


def stylize(usage, /, *, colorful=True, styles=None):
    """
    wrap plain usage text into a rich Text, highlighting headers and switches.

    palette keys
    - usage-section, option-names, default-value
    a __styles__ mapping in __main__ (or the styles argument) overrides them.
    """
    text = Text(usage)
    if not colorful:
        return text

    palette = defaultdict(str, {
        "usage-section": "bold #FF4DA6",
        "option-names": "bold #00E5FF",
        "default-value": "dim",
    } | getattr(__import__("__main__"), "__styles__", {}) | (styles or {}))

    text.highlight_regex(r"(?m)^(Usage|Options):$", palette["usage-section"])
    text.highlight_regex(r"(?m)^  -\S+, --\S+", palette["option-names"])
    text.highlight_regex(r"\(default=[^\n]*\)", palette["default-value"])
    return text


__all__ = (
    "sort_options",
    "unquote",
    "format_default",
    "render_option",
    "render",
    "stylize",
)
