"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details
"""


class StacksError(Exception):
    pass


class SerializationError(StacksError):
    """
    A value violates a size or format constraint and cannot be encoded.
    """

    pass


class DeserializationError(StacksError):
    """
    The input bytes are malformed, truncated, or carry an unknown type tag.
    """

    pass


class UnexpectedEndOfInput(DeserializationError):
    """
    A read was attempted past the end of the input.
    """

    pass


class SigningError(StacksError):
    """
    A signing step was attempted out of order, would oversign a spending
    condition, or the signature did not verify.
    """

    pass
