"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details
"""

from tinystacks import StacksError

from . import mainnet, testnet


the_nets = {n.Name: n for n in (mainnet, testnet)}


def parse(name):
    """
    Get the network parameters based on the network name.

    Args:
        name (str): "mainnet" or "testnet".

    Returns:
        module: The network parameters module.
    """
    try:
        return the_nets[name]
    except KeyError:
        raise StacksError(f"unrecognized network name {name}")
