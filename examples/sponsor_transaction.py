"""
Copyright (c) 2020, the TinyStacks developers

This example script signs a contract call as its origin and then as a sponsor
who pays the fee, the way the two parties would sign on separate machines.
"""

from tinystacks import builders
from tinystacks.crypto.crypto import PrivateKey
from tinystacks.wire.clarity import bufferCVFromString
from tinystacks.wire.transaction import StacksTransaction


CONTRACT_ADDRESS = "ST3KC0MTNW34S1ZXD36JYKFD3JJMWA01M55DSJ4JE"


def main():
    originKey = PrivateKey.random()
    sponsorKey = PrivateKey.random()

    # The origin signs and hands the transaction to the sponsor.
    tx = builders.makeContractCall(
        CONTRACT_ADDRESS,
        "kv-store",
        "get-value",
        [bufferCVFromString("foo")],
        originKey,
        network="testnet",
        sponsored=True,
    )
    originSigned = tx.txHex()
    print("Origin-signed transaction: %s" % originSigned)

    # The sponsor sets the fee and signs.
    tx = StacksTransaction.deserialize(originSigned)
    builders.sponsorTransaction(tx, sponsorKey, fee=1000, sponsorNonce=3)
    tx.verifySponsor()
    print("Transaction ID: %s" % tx.txid())
    print(tx.txHex())


if __name__ == "__main__":
    main()
