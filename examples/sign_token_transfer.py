"""
Copyright (c) 2020, the TinyStacks developers

This example script creates a random testnet key, signs an STX transfer from
its address, and prints the transaction ID and the hex-encoded transaction.
"""

from tinystacks import builders
from tinystacks.crypto.crypto import PrivateKey
from tinystacks.nets import testnet
from tinystacks.wire import wire
from tinystacks.wire.address import Address


# The recipient of the transfer.
RECIPIENT = "ST1EXHZSN8MJSJ9DSG994G1V8CNKYXGMK7Z4SA6DH"


def main():
    senderKey = PrivateKey.random()
    sender = Address.fromPublicKeys(
        testnet.AddressVersionSingleSig, wire.HashModeP2PKH, 1, [senderKey.pubKey()]
    )
    print("Sending from %s" % sender.string())

    # Only send STX to the recipient if they end up with at least 1 STX.
    postCondition = builders.makeStandardSTXPostCondition(
        sender.string(), wire.FungibleLessEqual, 1000000
    )
    tx = builders.makeSTXTokenTransfer(
        RECIPIENT,
        1000000,
        senderKey,
        memo="hello",
        network=testnet,
        fee=180,
        nonce=0,
        postConditions=[postCondition],
    )
    print("Transaction ID: %s" % tx.txid())
    print(tx.txHex())


if __name__ == "__main__":
    main()
