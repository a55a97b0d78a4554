"""Shared test fixtures for Ultra Debugger tests."""

import random

import pytest

from ultra_debugger.config import DebuggerConfig
from ultra_debugger.controller import DebugController
from ultra_debugger.execution import ExecutionHarness
from ultra_debugger.models import MemorySample


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def fake_probe() -> MemorySample:
    return MemorySample(timestamp=0, heap_used=1024, heap_total=4096)


def make_harness(pass_probability=1.0, seed=0, **kwargs) -> ExecutionHarness:
    """Harness with no delays and a fake memory probe."""
    options = dict(
        pass_probability=pass_probability,
        rng=random.Random(seed),
        max_execution_delay=0.0,
        suite_delay=0.0,
        memory_sample_limit=2,
        memory_sample_interval=0.0,
        memory_probe=fake_probe,
    )
    options.update(kwargs)
    return ExecutionHarness(**options)


@pytest.fixture
def harness():
    """Fast harness where every synthetic suite passes."""
    return make_harness()


@pytest.fixture
def out_dir(tmp_path):
    """Directory that receives reports and fixed code."""
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def make_controller(out_dir):
    """Factory for controllers that write into ``out_dir``."""

    def _make(harness=None, **overrides):
        options = dict(output_dir=str(out_dir), save_report=False, save_fixed_code=False)
        options.update(overrides)
        return DebugController(DebuggerConfig(**options), harness=harness or make_harness())

    return _make


@pytest.fixture
def clean_source():
    """Source that produces no findings at all."""
    return "let total = 1;\nconst label = total;\n"


@pytest.fixture
def accumulator_source():
    return "let s; for(let i=0;i<a.length;i++){ s += a[i]; } return s;"


@pytest.fixture
def unreachable_source():
    return (
        "function finish(value) {\n"
        "  return value;\n"
        "  cleanup();\n"
        "}\n"
    )


@pytest.fixture
def js_file(tmp_path, unreachable_source):
    path = tmp_path / "app.js"
    path.write_text(unreachable_source, encoding="utf-8")
    return path
