"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details
"""

import random

import pytest

from tinystacks import config
from tinystacks.util import helpers


# Seed initialization is delegated to tests.
# random.seed(0)


@pytest.fixture
def randBytes():
    def _randBytes(low=0, high=50):
        return bytes(random.randint(0, 255) for _ in range(random.randint(low, high)))

    return _randBytes


@pytest.fixture(scope="module")
def prepareLogger(request):
    helpers.prepareLogging()


@pytest.fixture
def tmpConfig(tmp_path, monkeypatch):
    """
    A testnet configuration backed by a temporary settings file, installed as
    the loaded configuration.
    """
    cfg = config.StacksConfig(config.TESTNET, path=str(tmp_path / config.CONFIG_NAME))
    monkeypatch.setattr(config, "stacksConfig", cfg)
    return cfg
