"""
Small helpers shared by the command tree, the config and the runner.

- Unset: the "argument not given" marker. None is a meaningful value for
  several fields (a command without alias, a group without handler), so
  defaults need a marker of their own. Resolve it with coalesce().
- rename("name"): decorator fixing __name__/__qualname__ of handlers built
  inside functions, so builtin commands read as "help" and not
  "Runner._builtins.<locals>.help" in reprs and tracebacks.
- mirror("field"): read-only property over self._field. Lists, dicts and
  sets are handed out as copies.

    >>> coalesce(Unset, "app")
    'app'
    >>> coalesce("", "app")
    ''
"""
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker; there is exactly one instance.

    Unset is falsey but differs from None, survives copy and pickle as the
    same object, and joins PEP 604 unions so isinstance(x, str | Unset)
    reads naturally.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __or__(self, other, /):
        return type(self) | other

    def __ror__(self, other, /):
        return other | type(self)

    def __bool__(self):
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __repr__(self):
        return "Unset"


def coalesce(object, default=None, /):
    """
    object, unless it is Unset: then default.
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator giving the decorated callable a fixed __name__ and __qualname__.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("rename() must be applied to a callable")
        function.__name__ = function.__qualname__ = name
        return function

    decorator.__name__ = decorator.__qualname__ = "rename"
    return decorator


def _detach(value):
    # Copies containers all the way down; leaves everything else shared.
    match value:
        case str():
            return value
        case Sequence():
            return [_detach(item) for item in value]
        case Mapping():
            return {key: _detach(item) for key, item in value.items()}
        case Set():
            return {_detach(item) for item in value}
        case _:
            return value


def mirror(name, /):
    """
    Read-only property exposing self._<name>.

        class Command:
            children = mirror("children")   # reads self._children
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    field = "_" + name

    @rename(name)
    def getter(self):
        return _detach(getattr(self, field))

    return property(getter)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
