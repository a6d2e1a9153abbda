from enum import IntEnum
from typing import Generic
from typing import NamedTuple
from typing import TypeVar

import warp as wp

T = TypeVar("T")


class Direction(IntEnum):
    """
    Which of two ping-pong buffers is read and which is written in a step.

    FORWARD reads the primary buffer and writes the secondary one, BACKWARD the
    opposite. Steps alternate strictly, starting with FORWARD.
    """

    FORWARD = 0
    BACKWARD = 1

    def flipped(self) -> "Direction":
        return Direction.BACKWARD if self is Direction.FORWARD else Direction.FORWARD

    @classmethod
    def for_step(cls, step: int) -> "Direction":
        """Direction of the step with index ``step`` (0-based)."""
        return cls.FORWARD if step % 2 == 0 else cls.BACKWARD


class BufferPair(NamedTuple):
    """The buffer a step reads from and the buffer it writes to."""

    source: wp.array
    destination: wp.array

    @classmethod
    def create(cls, source: wp.array, destination: wp.array) -> "BufferPair":
        if source is destination or source.ptr == destination.ptr:
            raise ValueError("A step cannot read from and write to the same buffer")
        return cls(source, destination)


class DirectionalBinding(Generic[T]):
    """
    Two pre-built variants of the same resource, one per direction.

    The variants are typically kernels, solvers or buffer pairs bound to the two
    ping-pong buffers in opposite roles. Selecting one never rebuilds anything.
    The direction itself is owned by the stepping driver and passed in.
    """

    def __init__(self, forward: T, backward: T):
        self.forward = forward
        self.backward = backward

    def select(self, direction: Direction) -> T:
        if direction == Direction.FORWARD:
            return self.forward
        return self.backward

    @classmethod
    def ping_pong(cls, a: wp.array, b: wp.array) -> "DirectionalBinding[BufferPair]":
        """Binding of the (source, destination) roles of buffers ``a`` and ``b``."""
        return cls(BufferPair.create(a, b), BufferPair.create(b, a))
