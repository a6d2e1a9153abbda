import heatwarp
import warp as wp
from heatwarp.sparse import DIAMatrix

wp.init()


def test_public_names_resolve():
    for name in heatwarp.__all__:
        assert getattr(heatwarp, name) is not None


def test_matrix_device_is_warp_device():
    a = DIAMatrix.identity(4, device="cpu")

    assert isinstance(a.device, wp.Device)
    assert a.device.is_cpu
