"""Configures pytest further."""
import random

import pytest

TEST_SEED = 20250917


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip slower key sizes")
    parser.addoption("--run-extreme", action="store_true", default=False, help="run multi-thousand-bit key sizes")


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: larger key sizes, skipped by --skip-slow")
    config.addinivalue_line("markers", "extreme: very large key sizes, needs --run-extreme")


def pytest_collection_modifyitems(config, items):
    skipdict = {}
    if config.getoption("--skip-slow"):
        skipdict["slow"] = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    if not config.getoption("--run-extreme"):
        skipdict["extreme"] = pytest.mark.skip(reason="Extreme test: needs --run-extreme option")
    if not skipdict:
        return
    for item in items:
        for k, v in skipdict.items():
            if k in item.keywords:
                item.add_marker(v)


@pytest.fixture
def rng() -> random.Random:
    """A freshly seeded random source, so generated keys are the same on every run."""
    return random.Random(TEST_SEED)
