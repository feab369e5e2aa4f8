"""
errchain Exception Hierarchy

Failures raised by the library itself, as opposed to the error chains it
builds and serializes.  Each exception type maps to a specific misuse or
input problem so callers can handle it precisely without parsing message
strings.

Usage::

    from errchain.exceptions import ChainFormatError

    try:
        chain = from_json(payload)
    except ChainFormatError as exc:
        print(f"Bad chain document: {exc}")
"""


class ErrchainError(Exception):
    """Base exception for all errchain library errors."""


class InvalidConstructionError(ErrchainError, TypeError):
    """An error node was built with no fields, or with a kind the wire format cannot hold.

    This signals a programming defect at the call site.  Let it propagate;
    catching it deep in library code hides a bug rather than handling a
    runtime condition.
    """


class ChainFormatError(ErrchainError, ValueError):
    """A serialized chain document is structurally invalid."""


class VarintError(ChainFormatError):
    """A variable-length integer is truncated or exceeds 64 bits.

    Raised by :mod:`errchain.core.varint`; the binary decoder catches it
    and logs instead of propagating.
    """


class ConfigError(ErrchainError, ValueError):
    """Configuration is invalid (e.g. an unknown log level)."""
