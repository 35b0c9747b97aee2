"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

Cryptographic functions. Hashing uses hashlib. The secp256k1 curve operations
are delegated to libsecp256k1 through coincurve.
"""

import hashlib

import coincurve

from tinystacks import SigningError, StacksError
from tinystacks.util.encode import ByteArray


HASH_SIZE = 32
RIPEMD160_SIZE = 20
PRIVATE_KEY_SIZE = 32
COMPRESSED_PUBKEY_SIZE = 33
UNCOMPRESSED_PUBKEY_SIZE = 65
RECOVERABLE_SIG_SIZE = 65

# A private key serialized with this trailing byte signals that the public key
# should be used in its compressed form.
COMPRESSED_KEY_SUFFIX = 0x01


class KeyFormatError(StacksError):
    """
    A KeyFormatError indicates a private or public key of the wrong length,
    with a bad suffix or prefix, or outside of the curve's valid range.
    """

    pass


def sha256(b):
    """
    A SHA-256 hash.

    Args:
        b (byte-like): The bytes to hash.

    Returns:
        ByteArray: A 32-byte hash.
    """
    return ByteArray(hashlib.sha256(bytes(b)).digest())


def hash160(b):
    """
    A RIPEMD160 hash of the sha256 hash of the input.

    Args:
        b (byte-like): The bytes to hash.

    Returns:
        ByteArray: A 20-byte hash.
    """
    h = hashlib.new("ripemd160")
    h.update(hashlib.sha256(bytes(b)).digest())
    return ByteArray(h.digest())


def sha512_256(b):
    """
    The SHA-512/256 hash, the truncated SHA-512 variant with its own initial
    values, used for transaction ids and sighashes.

    Args:
        b (byte-like): The bytes to hash.

    Returns:
        ByteArray: A 32-byte hash.
    """
    h = hashlib.new("sha512_256")
    h.update(bytes(b))
    return ByteArray(h.digest())


def txidFromData(b):
    """
    The transaction id for the serialized transaction bytes.

    Args:
        b (byte-like): A serialized transaction.

    Returns:
        str: The hex-encoded sha512/256 hash.
    """
    return sha512_256(b).hex()


class PublicKey:
    """
    A secp256k1 public key in its serialized SEC form, either compressed (33
    bytes) or uncompressed (65 bytes).
    """

    def __init__(self, key):
        """
        Args:
            key (str, byte-like, ByteArray): The serialized key. Strings are
                interpreted as hexadecimal.
        """
        key = ByteArray(key)
        if len(key) == COMPRESSED_PUBKEY_SIZE:
            if key[0] not in (0x02, 0x03):
                raise KeyFormatError("invalid compressed public key prefix")
        elif len(key) == UNCOMPRESSED_PUBKEY_SIZE:
            if key[0] != 0x04:
                raise KeyFormatError("invalid uncompressed public key prefix")
        else:
            raise KeyFormatError(f"invalid public key length {len(key)}")
        try:
            coincurve.PublicKey(key.bytes())
        except ValueError as e:
            raise KeyFormatError(f"invalid public key: {e}")
        self.key = key

    def __eq__(self, other):
        return isinstance(other, PublicKey) and self.key == other.key

    def __repr__(self):
        return f"PublicKey({self.key.hex()})"

    def compressed(self):
        """
        Whether the key is in compressed form.

        Returns:
            bool: True for the 33-byte form.
        """
        return len(self.key) == COMPRESSED_PUBKEY_SIZE

    def hex(self):
        return self.key.hex()

    def hash160(self):
        """
        The hash160 of the serialized key, the signer hash of a P2PKH
        spending condition.

        Returns:
            ByteArray: The 20-byte hash.
        """
        return hash160(self.key.b)

    def serialize(self):
        return self.key.copy()

    @staticmethod
    def deserialize(b):
        """
        Read a serialized public key, sized by its prefix byte.

        Args:
            b (ByteArray): The cursor.

        Returns:
            PublicKey: The key.
        """
        uncompressed = len(b) > 0 and b[0] == 0x04
        size = UNCOMPRESSED_PUBKEY_SIZE if uncompressed else COMPRESSED_PUBKEY_SIZE
        return PublicKey(b.pop(size))


class PrivateKey:
    """
    A secp256k1 private key. The key carries a flag indicating whether its
    public key, and therefore the signer hash derived from it, uses the
    compressed or uncompressed form.
    """

    def __init__(self, key):
        """
        Args:
            key (str, byte-like, ByteArray): 32 bytes for an uncompressed-intent
                key, or 33 bytes ending in 0x01 for a compressed-intent key.
                Strings are interpreted as hexadecimal, so they must be 64
                or 66 characters long.
        """
        if isinstance(key, str):
            if len(key) not in (2 * PRIVATE_KEY_SIZE, 2 * PRIVATE_KEY_SIZE + 2):
                raise KeyFormatError(f"invalid private key hex length {len(key)}")
            try:
                key = ByteArray(key)
            except ValueError:
                raise KeyFormatError("private key is not hexadecimal")
        else:
            key = ByteArray(key)

        if len(key) == PRIVATE_KEY_SIZE + 1:
            if key[PRIVATE_KEY_SIZE] != COMPRESSED_KEY_SUFFIX:
                raise KeyFormatError(
                    "a 33-byte private key must end with the 0x01 compression flag"
                )
            self.compressed = True
            key = key[:PRIVATE_KEY_SIZE].copy()
        elif len(key) == PRIVATE_KEY_SIZE:
            self.compressed = False
        else:
            raise KeyFormatError(f"invalid private key length {len(key)}")

        try:
            self.ecKey = coincurve.PrivateKey(key.bytes())
        except ValueError as e:
            raise KeyFormatError(f"invalid private key: {e}")
        self.key = key

    @staticmethod
    def random(compressed=True):
        """
        Generate a new random private key.

        Args:
            compressed (bool): Whether the key should use the compressed
                public key form.

        Returns:
            PrivateKey: The new key.
        """
        k = ByteArray(coincurve.PrivateKey().secret)
        if compressed:
            k += bytearray([COMPRESSED_KEY_SUFFIX])
        return PrivateKey(k)

    def __repr__(self):
        return f"PrivateKey(compressed={self.compressed})"

    def hex(self):
        """
        The hex encoding of the key, including the compression suffix where
        present.
        """
        if self.compressed:
            return self.key.hex() + "%02x" % COMPRESSED_KEY_SUFFIX
        return self.key.hex()

    def pubKey(self):
        """
        The public key in the form selected by the compression flag.

        Returns:
            PublicKey: The public key.
        """
        return PublicKey(self.ecKey.public_key.format(compressed=self.compressed))

    def sign(self, msgHash):
        """
        Sign the 32-byte message hash. The nonce is generated deterministically
        according to RFC 6979 and the s value is normalized to the lower half
        of the curve order.

        Args:
            msgHash (byte-like): The 32-byte hash to sign.

        Returns:
            ByteArray: The 65-byte recoverable signature, recovery id first,
                followed by the 32-byte r and s values.
        """
        msgHash = ByteArray(msgHash)
        if len(msgHash) != HASH_SIZE:
            raise SigningError(f"cannot sign a {len(msgHash)}-byte message hash")
        sig = self.ecKey.sign_recoverable(msgHash.bytes(), hasher=None)
        # libsecp256k1 orders the compact form r || s || recid.
        return ByteArray(sig[64:]) + sig[:64]


def recoverPublicKey(msgHash, signature, compressed=True):
    """
    Recover the public key that produced the signature over msgHash.

    Args:
        msgHash (byte-like): The 32-byte signed hash.
        signature (byte-like): The 65-byte recovery id || r || s signature.
        compressed (bool): The form of the returned key.

    Returns:
        PublicKey: The recovered key.
    """
    signature = ByteArray(signature)
    if len(signature) != RECOVERABLE_SIG_SIZE:
        raise SigningError(f"invalid signature length {len(signature)}")
    compact = signature[1:].bytes() + signature[:1].bytes()
    try:
        pub = coincurve.PublicKey.from_signature_and_message(
            compact, ByteArray(msgHash).bytes(), hasher=None
        )
    except ValueError as e:
        raise SigningError(f"unable to recover public key: {e}")
    return PublicKey(pub.format(compressed=compressed))
