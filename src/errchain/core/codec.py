"""
errchain Codecs

Pure functions converting an error chain to and from its external forms:

- :func:`display` — human-readable, one node per line (``str(node)``).
- :func:`serialize` / :func:`unserialize` — length-prefixed binary form,
  lossless for chains of :class:`ErrorNode`.
- :func:`encode` — DSV text form using ASCII unit/record separators
  (write-only, meant for eyeballing and diffing).
- :func:`to_dict` / :func:`from_dict` / :func:`to_json` / :func:`from_json`
  — nested JSON document keyed ``error``/``kind``/``location``/``previous``.

Binary layout, repeated once per node from the outermost inwards::

    varint(kind) uvarint(len) location uvarint(len) message

A foreign (non-node) exception in the chain is written as its
length-prefixed text alone and ends the chain.  All encoders and
decoders loop over the chain rather than recursing, so depth is bounded
only by memory.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from errchain.core.chain import ErrorNode, walk
from errchain.core.config import (
    DISPLAY_SEPARATOR,
    KIND_MAX,
    KIND_MIN,
    KIND_WIDTH,
    LOCATION_PREFIX,
    LOCATION_SUFFIX,
    RECORD_SEPARATOR,
    UNIT_SEPARATOR,
)
from errchain.core.varint import decode_uvarint, decode_varint, encode_uvarint, encode_varint
from errchain.exceptions import ChainFormatError

logger = logging.getLogger(__name__)


# =============================================================================
# Display
# =============================================================================

def display(err: BaseException, separator: str = DISPLAY_SEPARATOR) -> str:
    """Render *err* outermost-first as ``"@ <location>; <message>"`` lines."""
    parts = []
    for link in walk(err):
        if not isinstance(link, ErrorNode):
            parts.append(str(link))
            continue
        prefix = f"{LOCATION_PREFIX}{link.location}{LOCATION_SUFFIX}" if link.location else ""
        parts.append(prefix + link.message)
    return separator.join(parts)


# =============================================================================
# Binary
# =============================================================================

def _write_string(buf: bytearray, text: str) -> None:
    raw = text.encode("utf-8")
    buf += encode_uvarint(len(raw))
    buf += raw


def _read_string(data: bytes, offset: int, field_name: str) -> Tuple[str, int]:
    length, offset = decode_uvarint(data, offset)
    remaining = len(data) - offset
    if length > remaining:
        raise ChainFormatError(
            f"{field_name} declares {length} bytes but only {remaining} remain"
        )
    end = offset + length
    return data[offset:end].decode("utf-8", errors="replace"), end


def serialize(err: BaseException) -> bytes:
    """Encode *err* and its whole cause chain into the binary form."""
    buf = bytearray()
    for link in walk(err):
        if isinstance(link, ErrorNode):
            buf += encode_varint(link.kind)
            _write_string(buf, link.location)
            _write_string(buf, link.message)
        else:
            _write_string(buf, str(link))
    return bytes(buf)


def unserialize(data: bytes) -> ErrorNode:
    """
    Rebuild a chain from :func:`serialize` output.

    Decoding is best-effort and never raises for bad bytes.  When a
    varint is unreadable or a length prefix overruns the buffer, the
    problem is logged, the field is left empty and the rest of the buffer
    is dropped; everything decoded before that point is kept.  An empty
    buffer yields a blank node.
    """
    data = bytes(data)
    if not data:
        logger.debug("Empty buffer; returning blank error node")
        return ErrorNode()

    records: List[List[Any]] = []
    offset = 0
    while True:
        record: List[Any] = [0, "", ""]
        try:
            record[0], offset = decode_varint(data, offset)
            record[1], offset = _read_string(data, offset, "location")
            record[2], offset = _read_string(data, offset, "message")
        except ChainFormatError as exc:
            logger.warning(
                "Malformed error chain at depth %d: %s; dropping remaining %d bytes",
                len(records), exc, len(data) - offset,
            )
            offset = len(data)
        records.append(record)
        logger.debug("Decoded node %d (kind=%d, offset=%d)", len(records) - 1, record[0], offset)
        if offset >= len(data):
            break

    cause: Optional[ErrorNode] = None
    for kind, location, message in reversed(records):
        cause = ErrorNode(message=message, kind=kind, location=location, cause=cause)
    return cause


# =============================================================================
# DSV text
# =============================================================================

def encode(err: BaseException) -> str:
    """
    Encode the chain as ``<kind><US><location><US><message><RS>`` records.

    *kind* is zero-padded to three digits.  A foreign exception is
    written as an unclassified record holding its text.
    """
    records = []
    for link in walk(err):
        if isinstance(link, ErrorNode):
            kind, location, message = link.kind, link.location, link.message
        else:
            kind, location, message = 0, "", str(link)
        records.append(
            f"{kind:0{KIND_WIDTH}d}{UNIT_SEPARATOR}{location}{UNIT_SEPARATOR}{message}{RECORD_SEPARATOR}"
        )
    return "".join(records)


# =============================================================================
# JSON
# =============================================================================

def _link_fields(link: BaseException) -> Dict[str, Any]:
    doc: Dict[str, Any] = {}
    if isinstance(link, ErrorNode):
        if link.message:
            doc["error"] = link.message
        if link.kind:
            doc["kind"] = int(link.kind)
        if link.location:
            doc["location"] = str(link.location)
    else:
        doc["error"] = str(link)
    return doc


def to_dict(err: BaseException) -> Dict[str, Any]:
    """Convert the chain into nested dicts; empty fields are omitted."""
    docs = [_link_fields(link) for link in walk(err)]

    for outer, inner in zip(docs, docs[1:]):
        outer["previous"] = inner
    return docs[0]


def from_dict(doc: Dict[str, Any]) -> ErrorNode:
    """
    Rebuild a chain from :func:`to_dict` output.

    Raises :class:`~errchain.exceptions.ChainFormatError` when a level is
    not an object, carries a field of the wrong type, or is cyclic.
    """
    records = []
    seen = set()
    level = 0
    current: Any = doc
    while current is not None:
        if not isinstance(current, dict):
            raise ChainFormatError(f"level {level}: expected an object, got {type(current).__name__}")
        if id(current) in seen:
            raise ChainFormatError(f"level {level}: 'previous' refers back to an enclosing level")
        seen.add(id(current))
        message = current.get("error", "")
        kind = current.get("kind", 0)
        location = current.get("location", "")
        if not isinstance(message, str) or not isinstance(location, str):
            raise ChainFormatError(f"level {level}: 'error' and 'location' must be strings")
        if isinstance(kind, bool) or not isinstance(kind, int) or not KIND_MIN <= kind <= KIND_MAX:
            raise ChainFormatError(f"level {level}: 'kind' must be a signed 64-bit integer")
        records.append((message, kind, location))
        current = current.get("previous")
        level += 1

    cause: Optional[ErrorNode] = None
    for message, kind, location in reversed(records):
        cause = ErrorNode(message=message, kind=kind, location=location, cause=cause)
    return cause


def to_json(err: BaseException) -> str:
    """
    Compact, key-sorted JSON text of :func:`to_dict`.

    Written level by level: ``"previous"`` sorts after every other key,
    so each level's own fields are dumped and the nested document is
    appended in place of the closing brace.
    """
    links = list(walk(err))
    parts = []
    for i, link in enumerate(links):
        head = json.dumps(_link_fields(link), sort_keys=True, separators=(",", ":"), ensure_ascii=False)[:-1]
        if i < len(links) - 1:
            head += ("," if head != "{" else "") + '"previous":'
        parts.append(head)
    return "".join(parts) + "}" * len(parts)


def from_json(text: str) -> ErrorNode:
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ChainFormatError(f"invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise ChainFormatError("JSON document nests too deeply to parse; use the binary form") from exc
    return from_dict(doc)
