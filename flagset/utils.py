"""
Flagset utilities.

- Unset: falsy singleton meaning "not provided", for places where None is a
  legitimate value (a FlagSet description, an option default).
- coalesce(value, default=None): resolve Unset to a default.
- rename("name"): decorator giving generated functions a stable __name__ and
  __qualname__, so generated reprs read well in tracebacks.
- mirror("attr"): read-only property over the private "_attr" field.
"""
import functools
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    One instance per process, falsy, printed as "Unset", cannot be subclassed.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """Return object, or default when object is Unset (falsy values are kept)."""
    return default if object is Unset else object


def rename(name, /):
    if not isinstance(name, str):
        raise TypeError("@rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("@rename() must be applied to a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def mirror(name, /):
    """Define a read-only property returning self._<name>."""
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    return property(rename(name)(lambda self: getattr(self, "_" + name)))


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
