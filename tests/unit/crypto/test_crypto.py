"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details
"""

import pytest

from tinystacks import SigningError
from tinystacks.crypto import crypto
from tinystacks.util.encode import ByteArray


privKeyHex = "edf9aee84d9b7abc145504dde6726c64f369d37ee34ded868fabd876c26570bc"
uncompressedPub = (
    "04ef788b3830c00abe8f64f62dc32fc863bc0b2cafeb073b6c8e1c7657d9c2c3ab"
    "5b435d20ea91337cdd8c30dd7427bb098a5355e9c9bfad43797899b8137237cf"
)
compressedPub = "03ef788b3830c00abe8f64f62dc32fc863bc0b2cafeb073b6c8e1c7657d9c2c3ab"


class TestHashes:
    def test_sha256(self):
        assert crypto.sha256(b"").hex() == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )
        assert crypto.sha256(b"abc").hex() == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_hash160(self):
        # The hash160 of the generator point, compressed.
        g = "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
        assert crypto.hash160(ByteArray(g).b).hex() == (
            "751e76e8199196d454941c45d1b3a323f1433bd6"
        )

    def test_sha512_256(self):
        assert crypto.sha512_256(b"abc").hex() == (
            "53048e2681941ef99b2e29b76b4c7dabe4c2d0c634fc6d46e0e2f13107e7af23"
        )
        assert len(crypto.sha512_256(b"")) == 32
        assert crypto.txidFromData(b"abc") == crypto.sha512_256(b"abc").hex()


class TestKeys:
    def test_private_key(self):
        privKey = crypto.PrivateKey(privKeyHex)
        assert not privKey.compressed
        assert privKey.pubKey().hex() == uncompressedPub
        assert not privKey.pubKey().compressed()
        assert privKey.hex() == privKeyHex

        privKey = crypto.PrivateKey(privKeyHex + "01")
        assert privKey.compressed
        assert privKey.pubKey().hex() == compressedPub
        assert privKey.pubKey().compressed()
        assert privKey.hex() == privKeyHex + "01"

        privKey = crypto.PrivateKey(ByteArray(privKeyHex).bytes())
        assert privKey.pubKey().hex() == uncompressedPub

        assert crypto.PrivateKey.random().compressed
        randKey = crypto.PrivateKey.random(compressed=False)
        assert len(randKey.hex()) == 64
        assert not randKey.pubKey().compressed()

    def test_bad_private_keys(self):
        with pytest.raises(crypto.KeyFormatError):
            crypto.PrivateKey("abcd")
        with pytest.raises(crypto.KeyFormatError):
            crypto.PrivateKey(privKeyHex + "02")
        with pytest.raises(crypto.KeyFormatError):
            crypto.PrivateKey("zz" * 32)
        with pytest.raises(crypto.KeyFormatError):
            crypto.PrivateKey(bytes(32))
        with pytest.raises(crypto.KeyFormatError):
            crypto.PrivateKey(bytes(31))

    def test_public_key(self):
        pubKey = crypto.PublicKey(uncompressedPub)
        assert not pubKey.compressed()
        assert pubKey == crypto.PublicKey(ByteArray(uncompressedPub))
        assert pubKey != crypto.PublicKey(compressedPub)
        assert pubKey.serialize() == uncompressedPub

        b = ByteArray(compressedPub) + uncompressedPub + "ff"
        assert crypto.PublicKey.deserialize(b).hex() == compressedPub
        assert crypto.PublicKey.deserialize(b).hex() == uncompressedPub
        assert b == "ff"

        with pytest.raises(crypto.KeyFormatError):
            crypto.PublicKey(compressedPub[2:])
        with pytest.raises(crypto.KeyFormatError):
            crypto.PublicKey("05" + compressedPub[2:])
        with pytest.raises(crypto.KeyFormatError):
            crypto.PublicKey("02" + uncompressedPub[2:])
        with pytest.raises(crypto.KeyFormatError):
            # Not on the curve.
            crypto.PublicKey(uncompressedPub[:-2] + "ce")


class TestSignatures:
    def test_sign(self):
        privKey = crypto.PrivateKey(privKeyHex)
        msgHash = "eec72e6cd1ce0ac1dd1a0c260f099a8fc72498c80b3447f962fd5d39a3d70921"
        sig = privKey.sign(msgHash)
        assert sig.hex() == (
            "019901d8b1d67a7b853dc473d0609508ab2519ec370eabfef460aa0fd9234660"
            "787970968562da9de8b024a7f36f946b2fdcbf39b2f59247267a9d72730f19276b"
        )
        # Deterministic.
        assert privKey.sign(msgHash) == sig

        assert crypto.recoverPublicKey(msgHash, sig, compressed=False).hex() == (
            uncompressedPub
        )
        assert crypto.recoverPublicKey(msgHash, sig).hex() == compressedPub

    def test_sign_errors(self):
        privKey = crypto.PrivateKey.random()
        with pytest.raises(SigningError):
            privKey.sign(b"short")
        with pytest.raises(SigningError):
            crypto.recoverPublicKey(bytes(32), bytes(64))

    def test_recover_other_message(self):
        privKey = crypto.PrivateKey.random()
        msgHash = crypto.sha256(b"message")
        sig = privKey.sign(msgHash)
        assert crypto.recoverPublicKey(msgHash, sig) == privKey.pubKey()
        otherHash = crypto.sha256(b"other message")
        try:
            recovered = crypto.recoverPublicKey(otherHash, sig)
        except SigningError:
            return
        assert recovered != privKey.pubKey()
