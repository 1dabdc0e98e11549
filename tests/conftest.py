"""Configuration for pytest tests.

Several custom command line options are added to the pytest configuration,
but they must be provided *after* all standard pytest options.

Note: https://docs.python.org/3/library/devmode.html#devmode may be enabled
"using the -X dev command line option or by setting the PYTHONDEVMODE environment
variable to 1." Dev mode makes the interpreter report resources that are
finalized without being closed, which is useful for the lifecycle chapter.
"""
import gc
import logging

import pytest

from magicmethods import lifecycle

logger = logging.getLogger("pytest_config")
logger.setLevel(logging.DEBUG)


def pytest_addoption(parser):
    """Add command-line user options for the pytest invocation."""
    parser.addoption("--experimental", action="store_true", default=False, help="run tests for experimental features")
    parser.addoption(
        "--exhaustive", action="store_true", default=False, help="run exhaustive coverage with extra tests"
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "experimental: mark test as experimental")
    config.addinivalue_line("markers", "exhaustive: mark test to run only for exhaustive testing")


def pytest_collection_modifyitems(config, items):
    # Ref https://docs.pytest.org/en/latest/example/simple.html#control-skipping-of-tests-according-to-command-line-option  # noqa: E501
    skip_experimental = pytest.mark.skip(reason="only runs for --experimental")
    skip_exhaustive = pytest.mark.skip(reason="use --exhaustive for more exhaustive testing")
    if not config.getoption("--experimental"):
        # skip experimental tests unless --experimental given in cli
        for item in items:
            if "experimental" in item.keywords:
                item.add_marker(skip_experimental)
    if not config.getoption("--exhaustive"):
        for item in items:
            if "exhaustive" in item.keywords:
                item.add_marker(skip_exhaustive)


@pytest.fixture
def plugin_registry():
    """Provide an empty plugin registry for the test and restore the original afterwards.

    Plugin classes defined inside a test are collected before the original
    registrations are restored.
    """
    registry = lifecycle.PluginBase._registry
    saved = dict(registry)
    registry.clear()
    yield registry
    registry.clear()
    gc.collect()
    registry.update(saved)


@pytest.fixture
def collect():
    """Provide a function that forces a full garbage collection."""

    def _collect():
        gc.collect()
        gc.collect()

    return _collect
