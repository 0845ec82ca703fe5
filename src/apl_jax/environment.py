"""Variable bindings consulted by lookups and updated by assignment."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, MutableMapping

from .errors import UndefinedVariableError
from .values import Value, format_value, validate_value

logger = logging.getLogger("apl_jax.environment")


class Environment(MutableMapping[str, Value]):
    """Mutable name -> Value table owned by whoever hosts the interpreter."""

    def __init__(self, data: Mapping[str, Value] | None = None) -> None:
        self._data: dict[str, Value] = {}
        if data is not None:
            for name, value in data.items():
                self[name] = value

    def __getitem__(self, key: str) -> Value:
        return self._data[key]

    def __setitem__(self, key: str, value: Value) -> None:
        if not isinstance(key, str) or not key:
            raise TypeError(f"Environment names must be non-empty strings, got {key!r}")
        validate_value(value, where=f"env[{key!r}]")
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Environment({self._data!r})"

    def lookup(self, name: str) -> Value:
        try:
            return self._data[name]
        except KeyError:
            raise UndefinedVariableError(name) from None

    def assign(self, name: str, value: Value) -> Value:
        self[name] = value
        logger.debug("bound %s = %s", name, format_value(value))
        return value
