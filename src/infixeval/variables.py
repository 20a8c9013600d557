"""Variable sets: how an evaluation resolves identifiers to values.

The engine only ever calls ``resolve(name)``. A variable set returns
UNDEFINED for names it does not know; ``None`` is a legitimate stored value.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


class _Undefined:
    """Marker type for an absent variable."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


@runtime_checkable
class VariableSet(Protocol):
    """Protocol for anything that can resolve variable names."""

    def resolve(self, name: str) -> Any:
        """Return the value of ``name``, or UNDEFINED if it is not set."""
        ...


class StaticVariableSet:
    """Variable set whose values are all known before evaluation starts.

    Usage:
        variables = StaticVariableSet({"Temperature": 10})
        variables.set("Pressure", 15)
        evaluator.evaluate("Temperature < 15 && Pressure > 10", variables)
    """

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values: dict[str, Any] = dict(values or {})

    def resolve(self, name: str) -> Any:
        return self._values.get(name, UNDEFINED)

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def set(self, name: str, value: Any) -> None:
        """Set a variable. Setting UNDEFINED removes it."""
        if value is UNDEFINED:
            self._values.pop(name, None)
        else:
            self._values[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"StaticVariableSet({self._values!r})"


class ChainedVariableSet:
    """Resolves a name against several variable sets in order.

    The first set that knows the name wins, e.g. explicit variables
    before record fields.
    """

    def __init__(self, *sets: VariableSet):
        self.sets = list(sets)

    def resolve(self, name: str) -> Any:
        for variables in self.sets:
            value = variables.resolve(name)
            if value is not UNDEFINED:
                return value
        return UNDEFINED


def as_variable_set(context: Any) -> VariableSet | None:
    """Coerce an evaluation context to a variable set.

    Accepts None, a VariableSet, or a mapping of names to values.
    """
    if context is None or isinstance(context, VariableSet):
        return context
    if isinstance(context, Mapping):
        return StaticVariableSet(context)
    raise TypeError(
        f"Evaluation context must be a mapping or define resolve(), "
        f"got {type(context).__name__}"
    )
