"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details
"""

import json
import logging
import os

from tinystacks.util import helpers


def test_mkdir(tmp_path):
    path = tmp_path / "a" / "b"
    assert helpers.mkdir(path)
    assert os.path.isdir(path)
    # Already exists.
    assert helpers.mkdir(path)
    filePath = tmp_path / "file"
    filePath.write_text("x")
    assert not helpers.mkdir(filePath)


def test_logging(tmp_path):
    logPath = tmp_path / "tinystacks.log"
    log = helpers.getLogger("TESTLOG")
    assert log.name == "TESTLOG"
    before = list(helpers.LogSettings.root.handlers)
    try:
        helpers.prepareLogging(logPath, logging.WARNING, {"TESTLOG": logging.DEBUG})
        assert log.level == logging.DEBUG
        assert helpers.getLogger("OTHER").level == logging.WARNING
        log.debug("a debug message")
        for handler in helpers.LogSettings.root.handlers:
            handler.flush()
        assert "a debug message" in logPath.read_text()
    finally:
        for handler in list(helpers.LogSettings.root.handlers):
            if handler not in before:
                helpers.LogSettings.root.removeHandler(handler)
                handler.close()
        helpers.LogSettings.moduleLevels.pop("TESTLOG")
        helpers.LogSettings.defaultLevel = logging.INFO


def test_logLevel():
    assert helpers.logLevel(10) == logging.DEBUG
    assert helpers.logLevel("20") == logging.INFO
    assert helpers.logLevel("warning") == logging.WARNING
    assert helpers.logLevel("ERROR") == logging.ERROR
    assert helpers.logLevel("chatty") == logging.NOTSET


def test_settings_file(tmp_path):
    path = tmp_path / "settings.json"
    assert helpers.fetchSettingsFile(path) == {}
    assert path.read_text() == "{}"

    helpers.saveJSON(path, {"b": 2, "a": [1]}, sort_keys=True)
    assert json.loads(path.read_text()) == {"a": [1], "b": 2}
    assert helpers.fetchSettingsFile(path) == {"a": [1], "b": 2}

    helpers.saveFile(path, "plain text")
    assert path.read_text() == "plain text"
