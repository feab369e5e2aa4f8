"""
errchain Core — chain model, codecs, varints and configuration.

Re-exports the primary names for convenience::

    from errchain.core import ErrorNode, new, serialize, unserialize
"""

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
from errchain.core.config import ErrchainConfig

__all__ = [
    "ErrorNode",
    "Kind",
    "Location",
    "TextError",
    "depth",
    "errorf",
    "has",
    "here",
    "is_kind",
    "new",
    "root_cause",
    "text_error",
    "unwrap",
    "walk",
    "display",
    "encode",
    "from_dict",
    "from_json",
    "serialize",
    "to_dict",
    "to_json",
    "unserialize",
    "ErrchainConfig",
]
