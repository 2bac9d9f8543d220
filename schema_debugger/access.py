"""Duck-typed property access shared by the tree walker and rule extraction."""

from collections.abc import Mapping
from typing import Any

_MISSING = object()


def read(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping key or an attribute, whichever exists."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    value = getattr(obj, name, _MISSING)
    return default if value is _MISSING else value


def has(obj: Any, name: str) -> bool:
    """True if ``name`` is present as a key or attribute."""
    if obj is None:
        return False
    if isinstance(obj, Mapping):
        return name in obj
    return hasattr(obj, name)


def as_params(value: Any) -> dict[str, Any] | None:
    """Copy a non-empty mapping with string keys; anything else is None."""
    if not isinstance(value, Mapping) or not value:
        return None
    return {str(key): val for key, val in value.items()}
