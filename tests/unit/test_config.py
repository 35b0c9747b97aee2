"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details
"""

import json
import logging
import os

import pytest

from tinystacks import StacksError, config, nets


def test_netConfig():
    assert config.netConfig("mainnet") == {"name": "mainnet"}
    with pytest.raises(StacksError):
        config.netConfig("nonet")


def test_StacksConfig(tmp_path):
    path = str(tmp_path / "sub" / config.CONFIG_NAME)
    cfg = config.StacksConfig(path=path)
    assert os.path.isfile(path)
    assert cfg.netParams is nets.testnet
    assert cfg.get("networks", "testnet", "name") == "testnet"
    assert cfg.get("networks", "mainnet") is None
    assert cfg.get("networks", "testnet", "name", "deeper") is None
    assert cfg.logLevel() == logging.INFO

    cfg.set("log_level", "debug")
    cfg.set(config.NETWORK_KEY, config.MAINNET)
    cfg.save()
    with open(path) as f:
        assert json.load(f)["log_level"] == "debug"

    # The saved network is the default.
    cfg = config.StacksConfig(path=path)
    assert cfg.netParams is nets.mainnet
    assert cfg.logLevel() == logging.DEBUG
    assert cfg.get("networks", "mainnet") == {"name": "mainnet"}

    # An explicit network name wins.
    cfg = config.StacksConfig(config.TESTNET, path=path)
    assert cfg.netParams is nets.testnet

    with pytest.raises(StacksError):
        config.StacksConfig("nonet", path=path)


def test_load(tmpConfig):
    assert config.load() is tmpConfig
    assert config.load(config.TESTNET) is tmpConfig
    with pytest.raises(StacksError):
        config.load(config.MAINNET)

