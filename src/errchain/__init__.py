"""
errchain — chainable, classified error values with lossless serialization.

An error carries a message, a kind (integer classification), a source
location and an optional cause.  Chains render as readable text and
serialize to a compact binary form that decodes back to the same chain.

Quick start::

    from errchain import Kind, new, here, is_kind, serialize, unserialize

    TIMEOUT = Kind(7)

    root = new("socket read timed out", kind=TIMEOUT, location=here())
    err = new("fetch failed", location=here(), cause=root)

    print(err)                      # @ app.py:6; fetch failed
                                    #     @ app.py:5; socket read timed out
    is_kind(err, TIMEOUT)           # True
    blob = serialize(err)
    assert unserialize(blob) == err

Quick start (CLI)::

    errchain show chain.bin
    errchain has 7 chain.bin
"""

__version__ = "1.0.0"

# Chain model
from errchain.core.chain import (
    ErrorNode,
    Kind,
    Location,
    TextError,
    depth,
    errorf,
    has,
    here,
    is_kind,
    new,
    root_cause,
    text_error,
    unwrap,
    walk,
)

# Codecs
from errchain.core.codec import (
    display,
    encode,
    from_dict,
    from_json,
    serialize,
    to_dict,
    to_json,
    unserialize,
)

# Configuration
from errchain.core.config import ErrchainConfig

# Exception hierarchy
from errchain.exceptions import (
    ChainFormatError,
    ConfigError,
    ErrchainError,
    InvalidConstructionError,
    VarintError,
)

__all__ = [
    "__version__",
    # Chain model
    "ErrorNode",
    "Kind",
    "Location",
    "TextError",
    "new",
    "here",
    "text_error",
    "errorf",
    "walk",
    "unwrap",
    "root_cause",
    "depth",
    "is_kind",
    "has",
    # Codecs
    "display",
    "serialize",
    "unserialize",
    "encode",
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Config
    "ErrchainConfig",
    # Exceptions
    "ErrchainError",
    "InvalidConstructionError",
    "ChainFormatError",
    "VarintError",
    "ConfigError",
]
