"""
Copyright (c) 2020, the TinyStacks developers

This example script decodes a hex-encoded transaction given on the command
line, prints its parts, and checks its signatures.
"""

import sys

from tinystacks import StacksError
from tinystacks.wire.clarity import cvToString
from tinystacks.wire.payload import ContractCallPayload, TokenTransferPayload
from tinystacks.wire.transaction import StacksTransaction


def main():
    if len(sys.argv) != 2:
        print("usage: %s <transaction hex>" % sys.argv[0])
        exit(1)
    tx = StacksTransaction.deserialize(sys.argv[1])
    origin = tx.auth.originCondition
    print("Transaction ID: %s" % tx.txid())
    print("Origin: %s" % origin.address(tx.version).string())
    print("Nonce: %d, fee: %d" % (origin.nonce, origin.fee))
    payload = tx.payload
    if isinstance(payload, TokenTransferPayload):
        recipient = cvToString(payload.recipient)
        print("Send %d micro-STX to %s" % (payload.amount, recipient))
    elif isinstance(payload, ContractCallPayload):
        args = " ".join(cvToString(arg) for arg in payload.functionArgs)
        print("Call (%s %s)" % (payload.functionName, args))
    for postCondition in tx.postConditions:
        print("Post-condition: %r" % postCondition)
    try:
        if tx.isSponsored():
            tx.verifySponsor()
        else:
            tx.verifyOrigin()
        print("Signatures are valid")
    except StacksError as e:
        print("Signature check failed: %s" % e)


if __name__ == "__main__":
    main()
