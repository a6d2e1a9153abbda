from __future__ import annotations

from typing import Iterable
from typing import Sequence

import warp as wp


def num_workgroups(work_size: int, workgroup_size: int) -> int:
    """Number of fixed-size workgroups needed to cover ``work_size`` invocations."""
    return (work_size + workgroup_size - 1) // workgroup_size


class LaunchStep:
    """
    A single pre-recorded kernel dispatch.

    Holds the compiled kernel, its bound arguments and its launch grid. Nothing
    is rebuilt when the step is launched; ``launch()`` only enqueues the recorded
    command on the current stream of the device.
    """

    def __init__(
        self,
        label: str,
        cmd: wp.Launch,
        work_size: int,
        workgroup_size: int,
        workgroups: int,
    ):
        self.label = label
        self.cmd = cmd
        self.work_size = work_size
        self.workgroup_size = workgroup_size
        self.workgroups = workgroups

    @classmethod
    def record(
        cls,
        label: str,
        kernel: wp.Kernel,
        dim: int,
        inputs: Sequence,
        outputs: Sequence = (),
        block_dim: int = 256,
        device: wp.Device | str | None = None,
    ) -> "LaunchStep":
        """Records a launch with one thread per element of ``dim``."""
        cmd: wp.Launch = wp.launch(
            kernel=kernel,
            dim=dim,
            inputs=list(inputs),
            outputs=list(outputs),
            block_dim=block_dim,
            device=device,
            record_cmd=True,
        )
        return cls(label, cmd, dim, block_dim, num_workgroups(dim, block_dim))

    @classmethod
    def record_tiled(
        cls,
        label: str,
        kernel: wp.Kernel,
        num_blocks: int,
        inputs: Sequence,
        outputs: Sequence = (),
        block_dim: int = 256,
        device: wp.Device | str | None = None,
    ) -> "LaunchStep":
        """Records a tiled launch with ``num_blocks`` cooperating thread blocks."""
        cmd: wp.Launch = wp.launch_tiled(
            kernel=kernel,
            dim=(num_blocks,),
            inputs=list(inputs),
            outputs=list(outputs),
            block_dim=block_dim,
            device=device,
            record_cmd=True,
        )
        return cls(label, cmd, num_blocks * block_dim, block_dim, num_blocks)

    def launch(self):
        self.cmd.launch()

    def __repr__(self) -> str:
        return (
            f"LaunchStep({self.label!r}, workgroups={self.workgroups}, "
            f"workgroup_size={self.workgroup_size})"
        )


class Kernel:
    """
    Base class of the composable compute kernels.

    A kernel is a fixed, ordered list of launch steps built at construction.
    Higher-level operations never need to know what kind of kernel they hold;
    they only flatten the steps into a :class:`ComputePass`.
    """

    steps: list[LaunchStep]

    def launch(self):
        for step in self.steps:
            step.launch()


class ComputePass:
    """A flat, ordered sequence of launch steps submitted together."""

    def __init__(self, steps: Iterable[LaunchStep], label: str = ""):
        self.label = label
        self.steps: list[LaunchStep] = list(steps)

    @classmethod
    def from_kernels(cls, kernels: Iterable[Kernel], label: str = "") -> "ComputePass":
        return cls((step for kernel in kernels for step in kernel.steps), label=label)

    def submit(self):
        for step in self.steps:
            step.launch()

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)
