"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

Configuration settings for TinyStacks.
"""

import logging
import os

from appdirs import AppDirs

from tinystacks import StacksError
from tinystacks import nets
from tinystacks.util import helpers


# Set the data directory in a OS-appropriate location.
_ad = AppDirs("TinyStacks", False)
DATA_DIR = _ad.user_data_dir

# The master configuration file name.
CONFIG_NAME = "tinystacks.conf"
CONFIG_PATH = os.path.join(DATA_DIR, CONFIG_NAME)

MAINNET = nets.mainnet.Name
TESTNET = nets.testnet.Name

# The settings key holding the default network name.
NETWORK_KEY = "network"

log = helpers.getLogger("CONFIG")


def netConfig(netName):
    """
    The default network settings for the provided network name.

    Args:
        netName (str): Network name, "mainnet" or "testnet".

    Returns:
        dict: The network settings.
    """
    netParams = nets.parse(netName)
    return {"name": netParams.Name}


class StacksConfig:
    """
    StacksConfig is configuration settings. The configuration file is JSON
    formatted.
    """

    def __init__(self, netName=None, path=CONFIG_PATH):
        """
        Args:
            netName (str): The network name. Optional. If not provided, the
                network is taken from the settings file, and if the file
                does not specify one, testnet is used.
            path (str): The settings file path. Optional, default is
                tinystacks.conf in the user data directory.
        """
        dataDir = os.path.dirname(path)
        if dataDir:
            helpers.mkdir(dataDir)
        self.path = path
        self.file = helpers.fetchSettingsFile(path)
        if not netName:
            netName = self.file.get(NETWORK_KEY, TESTNET)
        self.netParams = nets.parse(netName)
        self.normalize()
        log.debug(f"loaded {self.netParams.Name} configuration from {path}")

    def set(self, k, v):
        """
        Set the configuration option. The configuration is not saved, so `save`
        should be called separately.

        Args:
            k (str): The setting key.
            v (JSON-encodable): The value.
        """
        self.file[k] = v

    def get(self, *keys):
        """
        Retrieve the setting at the provided key path. Multiple keys can be
        provided, with each successive key being retrieved from the previous
        key's value.

        Args:
            *keys (str): Recursive key list.

        Returns:
            mixed: The configuration value.
        """
        d = self.file
        rVal = None
        for k in keys:
            if not isinstance(d, dict) or k not in d:
                return None
            rVal = d[k]
            d = rVal
        return rVal

    def normalize(self):
        """
        Make sure there is a settings section for the selected network.
        """
        file = self.file
        netKey = "networks"
        if netKey not in file:
            file[netKey] = {}
        if self.netParams.Name not in file[netKey]:
            file[netKey][self.netParams.Name] = netConfig(self.netParams.Name)

    def logLevel(self):
        """
        The default logging level from the "log_level" setting, or INFO.

        Returns:
            int: The logging level.
        """
        lvl = self.get("log_level")
        if lvl is None:
            return logging.INFO
        return helpers.logLevel(lvl)

    def save(self):
        """
        Save the file.
        """
        helpers.saveJSON(self.path, self.file, indent=4, sort_keys=True)


stacksConfig = None


def load(netName=None):
    """
    Load and return the current configuration.

    The configuration is only loaded once. Successive calls to the modular `load`
    function will return the same instance.

    Returns:
        StacksConfig: The current configuration.
    """
    global stacksConfig
    if not stacksConfig:
        stacksConfig = StacksConfig(netName)
    elif netName and netName != stacksConfig.netParams.Name:
        raise StacksError(
            f"configuration already loaded for {stacksConfig.netParams.Name}"
        )
    return stacksConfig
