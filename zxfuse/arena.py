"""
Slot arena with generation-counted handles.

An :class:`Arena` owns a table of slots. Inserting a payload returns a handle
made of the slot index and the slot generation. Removing a payload frees the
slot, bumps its generation and pushes the index onto a free stack, so the most
recently freed slot is reused first. A handle that outlived its slot never
aliases the new occupant: the generation no longer matches and any access
raises :class:`InvalidHandleError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from typing_extensions import override

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True, order=True)
class Handle:
    """
    Stable reference to an arena slot.

    Attributes
    ----------
    index : int
        Position of the slot in the arena table.
    generation : int
        Generation of the slot at the time the handle was issued.
    """

    index: int
    generation: int = 0

    @override
    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.index}, {self.generation})"


@dataclass(frozen=True, order=True, repr=False)
class NodeHandle(Handle):
    """Handle to a spider of a :class:`zxfuse.graph.ZXGraph`."""


@dataclass(frozen=True, order=True, repr=False)
class EdgeHandle(Handle):
    """Handle to an edge of a :class:`zxfuse.graph.ZXGraph`."""


@dataclass(frozen=True)
class InvalidHandleError(Exception):
    """
    Exception raised when a handle does not refer to an occupied slot.

    The slot may be free, out of range, reused by a newer generation, or the
    handle may belong to another kind of arena.
    """

    handle: object
    reason: str = "slot is free"

    @override
    def __str__(self) -> str:
        """
        Return a string representation of the error message.

        Returns
        -------
        str
            The message of the error.
        """
        return f"Invalid handle {self.handle!r}: {self.reason}"


_T = TypeVar("_T")
_H = TypeVar("_H", bound=Handle)


class _Slot(Generic[_T]):
    __slots__ = ("generation", "occupied", "payload")

    def __init__(self) -> None:
        self.generation = 0
        self.occupied = False
        self.payload: _T | None = None


class Arena(Generic[_H, _T]):
    """
    Table of payloads addressed by generation-counted handles.

    Handles are never renumbered: the table only grows, and freed slots are
    recycled in LIFO order.

    Parameters
    ----------
    handle_type : type[Handle]
        Class of the handles issued by this arena. Handles of any other class
        are rejected.
    """

    def __init__(self, handle_type: type[_H]) -> None:
        self.__handle_type = handle_type
        self.__slots: list[_Slot[_T]] = []
        self.__free: list[int] = []
        self.__len = 0

    @property
    def handle_type(self) -> type[_H]:
        """Return the class of the handles issued by this arena."""
        return self.__handle_type

    @property
    def capacity(self) -> int:
        """Return the number of slots, free ones included."""
        return len(self.__slots)

    def __len__(self) -> int:
        """Return the number of occupied slots."""
        return self.__len

    def insert(self, payload: _T) -> _H:
        """
        Store a payload and return its handle.

        The most recently freed slot is reused if any; otherwise the table
        grows by one slot.

        Parameters
        ----------
        payload : _T
            The value to store.

        Returns
        -------
        _H
            A fresh handle to the new slot occupant.
        """
        if self.__free:
            index = self.__free.pop()
            slot = self.__slots[index]
        else:
            index = len(self.__slots)
            slot = _Slot()
            self.__slots.append(slot)
        slot.occupied = True
        slot.payload = payload
        self.__len += 1
        return self.__handle_type(index, slot.generation)

    def remove(self, handle: _H) -> _T:
        """
        Free the slot referenced by ``handle`` and return its payload.

        Parameters
        ----------
        handle : _H
            A live handle.

        Returns
        -------
        _T
            The payload that occupied the slot.

        Raises
        ------
        InvalidHandleError
            If the handle is not live, including when it was already removed.
        """
        slot = self.__slot(handle)
        payload = slot.payload
        slot.occupied = False
        slot.payload = None
        slot.generation += 1
        self.__free.append(handle.index)
        self.__len -= 1
        return payload  # type: ignore[return-value]

    def get(self, handle: _H) -> _T:
        """
        Return the payload referenced by ``handle``.

        Raises
        ------
        InvalidHandleError
            If the handle is not live.
        """
        return self.__slot(handle).payload  # type: ignore[return-value]

    def set(self, handle: _H, payload: _T) -> None:
        """
        Replace the payload referenced by a live ``handle``.

        Raises
        ------
        InvalidHandleError
            If the handle is not live.
        """
        self.__slot(handle).payload = payload

    def __contains__(self, handle: object) -> bool:
        """Return ``True`` if ``handle`` refers to an occupied slot of this arena."""
        if not isinstance(handle, self.__handle_type):
            return False
        if not 0 <= handle.index < len(self.__slots):
            return False
        slot = self.__slots[handle.index]
        return slot.occupied and slot.generation == handle.generation

    def __iter__(self) -> Iterator[_H]:
        """Iterate over live handles in ascending slot order."""
        for index, slot in enumerate(self.__slots):
            if slot.occupied:
                yield self.__handle_type(index, slot.generation)

    def items(self) -> Iterator[tuple[_H, _T]]:
        """Iterate over ``(handle, payload)`` pairs in ascending slot order."""
        for index, slot in enumerate(self.__slots):
            if slot.occupied:
                yield self.__handle_type(index, slot.generation), slot.payload  # type: ignore[misc]

    def check(self, handle: object) -> None:
        """
        Ensure that ``handle`` is live.

        Raises
        ------
        InvalidHandleError
            If the handle is not live.
        """
        self.__slot(handle)

    def __slot(self, handle: object) -> _Slot[_T]:
        if not isinstance(handle, self.__handle_type):
            raise InvalidHandleError(handle, f"expected {self.__handle_type.__name__}")
        if not 0 <= handle.index < len(self.__slots):
            raise InvalidHandleError(handle, "index out of range")
        slot = self.__slots[handle.index]
        if not slot.occupied:
            raise InvalidHandleError(handle)
        if slot.generation != handle.generation:
            raise InvalidHandleError(handle, "slot was reused")
        return slot
