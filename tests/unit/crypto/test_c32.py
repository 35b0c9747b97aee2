"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details
"""

import pytest

from tinystacks.crypto import c32
from tinystacks.util.encode import ByteArray


class TestC32:
    def test_encode_decode(self, randBytes):
        assert c32.c32encode(b"") == ""
        assert c32.c32encode(b"\x00") == "0"
        assert c32.c32encode(b"\x00\x00\x01") == "001"
        assert c32.c32encode(b"\x20") == "10"
        assert c32.c32decode("001") == "000001"
        assert c32.c32decode("10") == "20"
        # Confusable characters decode to digits.
        assert c32.c32decode("oIl") == c32.c32decode("011")
        with pytest.raises(c32.AddressError):
            c32.c32decode("U")

        for _ in range(20):
            b = randBytes(0, 40)
            assert c32.c32decode(c32.c32encode(b)) == b

    def test_check_encode(self):
        h = "a46ff88886c2ef9762d970b4d2c63678835bd39d"
        s = c32.c32checkEncode(22, h)
        assert s[0] == "P"
        version, data = c32.c32checkDecode(s)
        assert version == 22
        assert data == h

        with pytest.raises(c32.AddressError):
            c32.c32checkEncode(32, h)
        with pytest.raises(c32.AddressError):
            c32.c32checkDecode("P")
        with pytest.raises(c32.AddressError):
            c32.c32checkDecode("P0")
        # Corrupt one character.
        bad = s[:-1] + ("0" if s[-1] != "0" else "1")
        with pytest.raises(c32.AddressError):
            c32.c32checkDecode(bad)

    def test_address(self):
        vectors = [
            (26, "c22d24fec5d06e539c551e732a5ba88997761ba0",
                "ST312T97YRQ86WMWWAMF76AJVN24SEXGVM1Z5EH0F"),  # noqa: E128
            (22, "b976e9f5d6181e40bed7fa589142dfcf2fb28d8e",
                "SP2WQDTFNTRC1WG5YTZX5H4A2VZ7JZCMDHV3PQATJ"),  # noqa: E128
            (20, "55011fc38a7e12f7d00496aef7a1c4b6dfeba81b",
                "SM1AG27Y3H9Z15XYG0JBAXXX1RJVDZTX83FA1DDSJ"),  # noqa: E128
            (21, "55011fc38a7e12f7d00496aef7a1c4b6dfeba81b",
                "SN1AG27Y3H9Z15XYG0JBAXXX1RJVDZTX83DE2F6ME"),  # noqa: E128
        ]
        for version, h, addr in vectors:
            assert c32.c32address(version, h) == addr
            decVersion, decHash = c32.c32addressDecode(addr)
            assert decVersion == version
            assert decHash == h
            assert isinstance(decHash, ByteArray)

        addr = "SP9YX31TK12T0EZKWP3GZXX8AM37JDQHAWM7VBTH"
        version, h = c32.c32addressDecode(addr)
        assert c32.c32address(version, h) == addr

    def test_bad_addresses(self):
        with pytest.raises(c32.AddressError):
            c32.c32address(22, "abcd")
        with pytest.raises(c32.AddressError):
            c32.c32addressDecode("ST12")
        with pytest.raises(c32.AddressError):
            c32.c32addressDecode("XT312T97YRQ86WMWWAMF76AJVN24SEXGVM1Z5EH0F")
        with pytest.raises(c32.AddressError):
            # Valid c32check, but the payload is not 20 bytes.
            c32.c32addressDecode("S" + c32.c32checkEncode(22, "abcd"))
        with pytest.raises(c32.AddressError):
            c32.c32addressDecode("ST312T97YRQ86WMWWAMF76AJVN24SEXGVM1Z5EH0G")
