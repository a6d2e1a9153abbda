import numpy as np
import pytest
import warp as wp
from heatwarp.kernels import Operation
from heatwarp.kernels import SAXPYUpdate
from heatwarp.kernels import SAXPYUpdateDiv

wp.init()


def _scalar(value: float, device) -> wp.array:
    return wp.array([value], dtype=wp.float32, device=device)


@pytest.mark.parametrize("op, expected", [(Operation.ADD, 1.0), (Operation.SUB, -1.0)])
def test_update_div_signs(op, expected):
    device = "cuda" if wp.is_cuda_available() else "cpu"
    n = 1000

    a1 = _scalar(1.0, device)
    a2 = _scalar(1.0, device)
    x = wp.ones(n, dtype=wp.float32, device=device)
    y = wp.zeros(n, dtype=wp.float32, device=device)

    SAXPYUpdateDiv(a1, a2, x, y, op).launch()

    assert np.all(y.numpy() == expected)


def test_update_div_uses_ratio():
    device = "cuda" if wp.is_cuda_available() else "cpu"

    np_x = np.random.rand(300).astype(np.float32)
    np_y = np.random.rand(300).astype(np.float32)

    a1 = _scalar(3.0, device)
    a2 = _scalar(4.0, device)
    x = wp.array(np_x, dtype=wp.float32, device=device)
    y = wp.array(np_y, dtype=wp.float32, device=device)

    SAXPYUpdateDiv(a1, a2, x, y, Operation.SUB).launch()

    assert np.allclose(y.numpy(), np_y - 0.75 * np_x, atol=1e-6)


def test_update_div_aypx():
    device = "cuda" if wp.is_cuda_available() else "cpu"

    np_x = np.random.rand(500).astype(np.float32)
    np_y = np.random.rand(500).astype(np.float32)

    a1 = _scalar(1.0, device)
    a2 = _scalar(2.0, device)
    x = wp.array(np_x, dtype=wp.float32, device=device)
    y = wp.array(np_y, dtype=wp.float32, device=device)

    SAXPYUpdateDiv(a1, a2, x, y, Operation.AYPX).launch()

    assert np.allclose(y.numpy(), np_x + 0.5 * np_y, atol=1e-6)


def test_update_div_reads_scalars_at_launch():
    device = "cuda" if wp.is_cuda_available() else "cpu"

    a1 = _scalar(1.0, device)
    a2 = _scalar(1.0, device)
    x = wp.ones(64, dtype=wp.float32, device=device)
    y = wp.zeros(64, dtype=wp.float32, device=device)

    kernel = SAXPYUpdateDiv(a1, a2, x, y, Operation.ADD)
    a1.fill_(5.0)
    kernel.launch()

    assert np.all(y.numpy() == 5.0)


def test_update_div_zero_denominator_gives_zero_ratio():
    device = "cuda" if wp.is_cuda_available() else "cpu"

    a1 = _scalar(0.0, device)
    a2 = _scalar(0.0, device)
    x = wp.ones(64, dtype=wp.float32, device=device)
    y = wp.full(64, 2.0, dtype=wp.float32, device=device)

    SAXPYUpdateDiv(a1, a2, x, y, Operation.ADD).launch()

    np_y = y.numpy()
    assert np.all(np.isfinite(np_y))
    assert np.all(np_y == 2.0)


def test_update_computes_x_minus_y():
    device = "cuda" if wp.is_cuda_available() else "cpu"

    np_x = np.random.rand(777).astype(np.float32)
    np_y = np.random.rand(777).astype(np.float32)

    x = wp.array(np_x, dtype=wp.float32, device=device)
    y = wp.array(np_y, dtype=wp.float32, device=device)

    SAXPYUpdate(x, y).launch()

    assert np.allclose(y.numpy(), np_x - np_y, atol=1e-7)


def test_update_div_step_label():
    x = wp.ones(8, dtype=wp.float32, device="cpu")
    y = wp.zeros(8, dtype=wp.float32, device="cpu")
    a = _scalar(1.0, "cpu")

    kernel = SAXPYUpdateDiv(a, a, x, y, Operation.AYPX)

    assert kernel.op is Operation.AYPX
    assert [step.label for step in kernel.steps] == ["saxpy_update_div/aypx"]


def test_rejects_mismatched_lengths():
    x = wp.ones(8, dtype=wp.float32, device="cpu")
    y = wp.zeros(9, dtype=wp.float32, device="cpu")

    with pytest.raises(ValueError, match="lengths differ"):
        SAXPYUpdate(x, y)
