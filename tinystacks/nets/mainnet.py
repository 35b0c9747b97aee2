"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

mainnet holds the Stacks mainnet parameters.
"""

from tinystacks.wire import wire


Name = "mainnet"
TransactionVersion = wire.TxVersionMainnet
ChainID = wire.ChainIDMainnet

# Address versions. Mainnet addresses start with SP (single-sig) or SM
# (multi-sig).
AddressVersionSingleSig = wire.AddressVersionMainnetSingleSig
AddressVersionMultiSig = wire.AddressVersionMainnetMultiSig
