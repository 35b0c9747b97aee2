"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

testnet holds the Stacks testnet parameters.
"""

from tinystacks.wire import wire


Name = "testnet"
TransactionVersion = wire.TxVersionTestnet
ChainID = wire.ChainIDTestnet

# Address versions. Testnet addresses start with ST (single-sig) or SN
# (multi-sig).
AddressVersionSingleSig = wire.AddressVersionTestnetSingleSig
AddressVersionMultiSig = wire.AddressVersionTestnetMultiSig
