"""Single-owner slots for objects handed out to content scripts."""
from __future__ import annotations

from typing import Generic, Optional, TypeVar

from galaxy.systems.errors import UsedHandleError

T = TypeVar("T")


class Owned(Generic[T]):
    """Holds one object until ownership is moved out with :meth:`take`.

    After the move the slot is empty and any further access raises
    :class:`UsedHandleError`, so a body attached to one parent cannot be
    attached to a second one.
    """

    __slots__ = ("_value", "_kind")

    def __init__(self, value: T, kind: str = "object") -> None:
        self._value: Optional[T] = value
        self._kind = kind

    @property
    def empty(self) -> bool:
        return self._value is None

    def get(self) -> T:
        if self._value is None:
            raise UsedHandleError(f"invalid {self._kind} (this {self._kind} has already been used)")
        return self._value

    def take(self) -> T:
        value = self.get()
        self._value = None
        return value

    def __repr__(self) -> str:
        state = "empty" if self._value is None else repr(self._value)
        return f"Owned({state})"


__all__ = ["Owned"]
