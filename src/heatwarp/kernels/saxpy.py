from enum import IntEnum

import warp as wp

from .launch_step import Kernel
from .launch_step import LaunchStep

SAXPY_WORKGROUP_SIZE = 256


class Operation(IntEnum):
    """How the ratio-scaled vector is combined with the target ``y``."""

    ADD = 0
    """y = y + (a1 / a2) * x"""

    SUB = 1
    """y = y - (a1 / a2) * x"""

    AYPX = 2
    """y = x + (a1 / a2) * y"""


@wp.kernel
def saxpy_update_kernel(
    x: wp.array(dtype=wp.float32),
    # Outputs
    y: wp.array(dtype=wp.float32),
):
    """y = x - y"""
    i = wp.tid()
    y[i] = x[i] - y[i]


@wp.func
def _safe_ratio(a1: wp.array(dtype=wp.float32), a2: wp.array(dtype=wp.float32)):
    # Use separate loads so the scalars written by a previous launch are read
    num = a1[0]
    den = a2[0]

    ratio = wp.float32(0.0)
    if den != 0.0:
        ratio = num / den
    return ratio


@wp.kernel
def saxpy_update_div_add_kernel(
    a1: wp.array(dtype=wp.float32),
    a2: wp.array(dtype=wp.float32),
    x: wp.array(dtype=wp.float32),
    # Outputs
    y: wp.array(dtype=wp.float32),
):
    i = wp.tid()
    ratio = _safe_ratio(a1, a2)
    y[i] = y[i] + ratio * x[i]


@wp.kernel
def saxpy_update_div_sub_kernel(
    a1: wp.array(dtype=wp.float32),
    a2: wp.array(dtype=wp.float32),
    x: wp.array(dtype=wp.float32),
    # Outputs
    y: wp.array(dtype=wp.float32),
):
    i = wp.tid()
    ratio = _safe_ratio(a1, a2)
    y[i] = y[i] - ratio * x[i]


@wp.kernel
def saxpy_update_div_aypx_kernel(
    a1: wp.array(dtype=wp.float32),
    a2: wp.array(dtype=wp.float32),
    x: wp.array(dtype=wp.float32),
    # Outputs
    y: wp.array(dtype=wp.float32),
):
    i = wp.tid()
    ratio = _safe_ratio(a1, a2)
    y[i] = x[i] + ratio * y[i]


_DIV_KERNELS = {
    Operation.ADD: saxpy_update_div_add_kernel,
    Operation.SUB: saxpy_update_div_sub_kernel,
    Operation.AYPX: saxpy_update_div_aypx_kernel,
}


def _check_same_length(x: wp.array, y: wp.array):
    if x.shape[0] != y.shape[0]:
        raise ValueError(f"Vector lengths differ: x has {x.shape[0]}, y has {y.shape[0]}")


class SAXPYUpdate(Kernel):
    """In-place update y = x - y, used to form the initial residual r = b - A x."""

    def __init__(self, x: wp.array, y: wp.array):
        _check_same_length(x, y)
        self.step = LaunchStep.record(
            "saxpy_update",
            saxpy_update_kernel,
            dim=y.shape[0],
            inputs=[x],
            outputs=[y],
            block_dim=SAXPY_WORKGROUP_SIZE,
            device=y.device,
        )
        self.steps = [self.step]


class SAXPYUpdateDiv(Kernel):
    """
    In-place update of ``y`` with a vector scaled by the ratio of two device scalars.

    ``a1`` and ``a2`` are one-element arrays, typically written by a :class:`Dot`
    kernel earlier in the same pass, and are read when the kernel runs. The
    combining operation is fixed at construction. A zero denominator gives a zero
    ratio.
    """

    def __init__(
        self,
        a1: wp.array,
        a2: wp.array,
        x: wp.array,
        y: wp.array,
        op: Operation,
    ):
        _check_same_length(x, y)
        self.op = Operation(op)
        self.step = LaunchStep.record(
            f"saxpy_update_div/{self.op.name.lower()}",
            _DIV_KERNELS[self.op],
            dim=y.shape[0],
            inputs=[a1, a2, x],
            outputs=[y],
            block_dim=SAXPY_WORKGROUP_SIZE,
            device=y.device,
        )
        self.steps = [self.step]
