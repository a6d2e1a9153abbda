import numpy as np
import pytest
import warp as wp
from heatwarp.logging import HDF5Logger
from heatwarp.logging import HDF5Reader
from heatwarp.logging import NullLogger

wp.init()


def test_scoped_datasets(tmp_path):
    path = str(tmp_path / "log.h5")

    with HDF5Logger(path) as logger:
        logger.log_scalar("grid_size", 8)
        with logger.scope("step_000001"):
            logger.log_array("field", np.arange(4, dtype=np.float32))
            logger.log_scalar("total_heat", 0.5)
        logger.log_attribute("units", "kelvin")

    with HDF5Reader(path) as reader:
        assert reader.get_scalar("grid_size") == 8
        assert reader.list_groups() == ["step_000001"]
        assert np.array_equal(reader.get_dataset("step_000001/field"), np.arange(4))
        assert reader.get_scalar("step_000001/total_heat") == pytest.approx(0.5)
        assert reader.get_attribute("/", "units") == "kelvin"


def test_log_warp_array(tmp_path):
    path = str(tmp_path / "log.h5")
    data = wp.array(np.linspace(0.0, 1.0, 10, dtype=np.float32), dtype=wp.float32, device="cpu")

    with HDF5Logger(path) as logger:
        logger.log_array("u", data, attributes={"grid_size": 10})

    with HDF5Reader(path) as reader:
        assert np.allclose(reader.get_dataset("u"), data.numpy())
        assert reader.get_attribute("u", "grid_size") == 10


def test_load_fields_sorted_by_step(tmp_path):
    path = str(tmp_path / "log.h5")

    with HDF5Logger(path) as logger:
        for step in (20, 0, 10):
            with logger.scope(f"step_{step:06d}"):
                logger.log_array("field", np.full((2, 2), step, dtype=np.float32))

    with HDF5Reader(path) as reader:
        steps = reader.snapshot_steps()
        fields = reader.load_fields()

    assert steps == [0, 10, 20]
    assert list(fields) == steps
    assert np.all(fields[10] == 10.0)


def test_load_series_skips_missing_values(tmp_path):
    path = str(tmp_path / "log.h5")

    with HDF5Logger(path) as logger:
        with logger.scope("config"):
            logger.log_scalar("grid_size", 4)
            logger.log_scalar("dt", 1e-3)
        for step, total in ((0, 1.0), (5, 0.8), (10, None)):
            with logger.scope(f"step_{step:06d}"):
                logger.log_array("field", np.zeros((4, 4), dtype=np.float32))
                if total is not None:
                    logger.log_scalar("total_heat", total)

    with HDF5Reader(path) as reader:
        steps, totals = reader.load_series("total_heat")
        config = reader.config()

    assert steps.tolist() == [0, 5]
    assert np.allclose(totals, [1.0, 0.8])
    assert config == {"grid_size": 4, "dt": pytest.approx(1e-3)}


def test_reader_missing_dataset(tmp_path):
    path = str(tmp_path / "log.h5")

    with HDF5Logger(path) as logger:
        logger.log_scalar("x", 1.0)
        logger.log_array("v", np.zeros(3, dtype=np.float32))

    with HDF5Reader(path) as reader:
        with pytest.raises(KeyError, match="step_000001/field"):
            reader.get_dataset("step_000001/field")
        with pytest.raises(ValueError, match="not a scalar"):
            reader.get_scalar("v")


def test_closed_logger_raises(tmp_path):
    logger = HDF5Logger(str(tmp_path / "log.h5"))

    with pytest.raises(IOError, match="not open"):
        logger.log_scalar("x", 1.0)


def test_reader_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        HDF5Reader(str(tmp_path / "missing.h5"))


def test_null_logger_discards_everything():
    logger = NullLogger()
    logger.open()
    with logger.scope("step_000000"):
        logger.log_array("field", np.zeros(3))
        logger.log_scalar("total_heat", 0.0)
    logger.close()

    assert not logger.is_open


def test_nested_scopes_unwind(tmp_path):
    path = str(tmp_path / "log.h5")

    with HDF5Logger(path) as logger:
        with logger.scope("step_000002"):
            with logger.scope("solver"):
                logger.log_scalar("cg_residual_norm", 1e-6)
            logger.log_scalar("total_heat", 0.25)

        with pytest.raises(RuntimeError):
            with logger.scope("step_000004"):
                raise RuntimeError("interrupted")
        logger.log_scalar("grid_size", 8)

    with HDF5Reader(path) as reader:
        assert reader.get_scalar("step_000002/solver/cg_residual_norm") == pytest.approx(1e-6)
        assert reader.get_scalar("step_000002/total_heat") == pytest.approx(0.25)
        assert reader.get_scalar("grid_size") == 8
        assert reader.list_groups() == ["step_000002"]
