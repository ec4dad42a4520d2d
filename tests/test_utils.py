"""Tests for configuration, the worker pool and timing helpers."""

import threading
import time

import numpy as np
import pytest

from lshkde import ExactEngine, configure, get_config, reset_config
from lshkde.utils.logging import Timer, timeit, memory_info
from lshkde.utils.parallel import WorkerPool, resolve_num_workers


# ---------- Configuration ----------

def test_defaults():
    cfg = get_config()
    assert cfg.hash_unit_cutoff == 1000
    assert cfg.k1_constant == 0.2
    assert cfg.k2_constant == 1.0
    assert cfg.lsh_bucket_width == 4.0
    assert cfg.dtype == "float64"


def test_configure_and_reset():
    configure(num_workers=3, hash_unit_cutoff=10)
    assert get_config().num_workers == 3
    assert get_config().hash_unit_cutoff == 10
    reset_config()
    assert get_config().num_workers is None
    assert get_config().hash_unit_cutoff == 1000


def test_unknown_key_warns():
    with pytest.warns(UserWarning, match="Unknown configuration parameter"):
        configure(not_a_setting=1)


@pytest.mark.parametrize("kwargs", [
    {"dtype": "int8"},
    {"num_workers": 0},
    {"k1_constant": 0.0},
    {"lsh_bucket_width": -1.0},
])
def test_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        configure(**kwargs)


def test_rejected_update_leaves_config_unchanged():
    configure(hash_unit_cutoff=7)
    with pytest.raises(ValueError):
        configure(num_workers=0, hash_unit_cutoff=9)
    assert get_config().num_workers is None
    assert get_config().hash_unit_cutoff == 7

    out = ExactEngine(np.zeros((3, 2)), 1.0).query(np.zeros((5, 2)))
    np.testing.assert_allclose(out, np.ones(5))


def test_jax_precision_follows_dtype():
    jax = pytest.importorskip("jax")
    assert jax.config.jax_enable_x64
    configure(dtype="float32")
    assert not jax.config.jax_enable_x64
    reset_config()
    assert jax.config.jax_enable_x64


def test_worker_resolution():
    assert resolve_num_workers(5) == 5
    assert resolve_num_workers() >= 1
    configure(num_workers=2)
    assert resolve_num_workers() == 2
    with pytest.raises(ValueError):
        resolve_num_workers(0)


def test_system_info():
    info = get_config().get_system_info()
    assert info["cpu_count"] >= 1
    assert info["system_memory_gb"] > 0


# ---------- Worker pool ----------

def test_pool_preserves_item_order():
    def slow_square(x):
        time.sleep(0.001 * (10 - x))
        return x * x

    with WorkerPool(4) as pool:
        assert pool.run(slow_square, range(10)) == [x * x for x in range(10)]


def test_pool_uses_several_threads():
    names = set()
    barrier = threading.Barrier(3, timeout=5)

    def record(_):
        names.add(threading.current_thread().name)
        barrier.wait()

    with WorkerPool(3) as pool:
        pool.run(record, range(3))
    assert len(names) == 3


def test_pool_propagates_first_failure():
    def fail_on_three(x):
        if x == 3:
            raise KeyError("three")
        return x

    with pytest.raises(KeyError):
        with WorkerPool(2) as pool:
            pool.run(fail_on_three, range(8))


def test_pool_requires_context():
    with pytest.raises(RuntimeError):
        WorkerPool(1).run(str, [1])


# ---------- Timing ----------

def test_timer_measures_elapsed(capsys):
    with Timer("quiet", verbose=False) as timer:
        time.sleep(0.01)
    assert timer.elapsed >= 0.005
    assert capsys.readouterr().out == ""

    with timeit("loud", track_memory=True):
        pass
    out = capsys.readouterr().out
    assert out.startswith("loud:")


def test_timer_not_started():
    with pytest.raises(RuntimeError):
        Timer().stop()


def test_memory_info_keys():
    info = memory_info()
    assert info["rss_mb"] > 0
    assert "available_mb" in info
