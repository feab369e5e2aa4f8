"""
errchain Error Chain Model

An :class:`ErrorNode` is one link of an error chain: a message, a kind
(classification code, ``0`` = unclassified), a source location and an
optional cause.  Chains are built bottom-up with :func:`new`, so they
never contain cycles, and nodes are read-only once built.

Usage::

    from errchain import Kind, new, here, has

    NOT_FOUND = Kind(4)

    root = new("row 12 missing", kind=NOT_FOUND, location=here())
    err = new("load failed", location=here(), cause=root)

    node, found = has(err, NOT_FOUND)   # -> (root, True)
"""

from __future__ import annotations

import os
import sys
from typing import Iterator, Optional, Tuple

from errchain.core.config import DISPLAY_SEPARATOR, KIND_MAX, KIND_MIN, LOG_SEPARATOR
from errchain.exceptions import InvalidConstructionError


class Kind(int):
    """Integer error classification; ``Kind(0)`` means unclassified."""

    def __repr__(self) -> str:
        return f"Kind({int(self)})"


class Location(str):
    """Opaque source-position token, conventionally ``"<file>:<line>"``."""

    def __repr__(self) -> str:
        return f"Location({str(self)!r})"


# =============================================================================
# Error node
# =============================================================================

class ErrorNode(Exception):
    """
    One link in an error chain.

    Fields are exposed as read-only properties.  ``str(node)`` renders the
    whole chain outermost-first, one node per line.  The cause is mirrored
    to ``__cause__`` so Python tracebacks show it too.

    Two nodes compare equal when every link of their chains carries the
    same kind, location and message.
    """

    def __init__(
        self,
        message: str = "",
        kind: int = 0,
        location: str = "",
        cause: Optional[BaseException] = None,
    ):
        if not KIND_MIN <= kind <= KIND_MAX:
            raise InvalidConstructionError(f"kind {kind} does not fit in a signed 64-bit integer")
        super().__init__(message)
        self._set_fields(message, kind, location, cause)

    def _set_fields(
        self,
        message: str,
        kind: int,
        location: str,
        cause: Optional[BaseException],
    ) -> None:
        self._message = str(message)
        self._kind = Kind(kind)
        self._location = Location(location)
        self._cause = cause
        self.args = (self._message,)
        self.__cause__ = cause

    # ── Fields ────────────────────────────────────────────────────

    @property
    def message(self) -> str:
        return self._message

    @property
    def kind(self) -> Kind:
        return self._kind

    @property
    def location(self) -> Location:
        return self._location

    @property
    def cause(self) -> Optional[BaseException]:
        """The wrapped predecessor, or ``None`` at the root of the chain."""
        return self._cause

    # ── Rendering ─────────────────────────────────────────────────

    def __str__(self) -> str:
        from errchain.core.codec import display

        return display(self, DISPLAY_SEPARATOR)

    def as_log_line(self) -> str:
        """Render the chain on a single line, nodes joined by ``"; "``."""
        from errchain.core.codec import display

        return display(self, LOG_SEPARATOR)

    def __repr__(self) -> str:
        return (
            f"ErrorNode({self._message!r}, kind={int(self._kind)}, "
            f"location={str(self._location)!r}, depth={depth(self)})"
        )

    # ── Binary form ───────────────────────────────────────────────

    def serialize(self) -> bytes:
        from errchain.core.codec import serialize

        return serialize(self)

    def unserialize(self, data: bytes) -> None:
        """
        Populate this (freshly created, blank) node from the binary form.

        Never raises for malformed input; see :func:`errchain.core.codec.unserialize`.
        """
        from errchain.core.codec import unserialize

        decoded = unserialize(data)
        self._set_fields(decoded.message, decoded.kind, decoded.location, decoded.cause)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ErrorNode":
        node = cls()
        node.unserialize(data)
        return node

    # ── Equality / pickling ───────────────────────────────────────

    def _fields(self) -> Tuple[int, str, str]:
        return int(self._kind), str(self._location), self._message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorNode):
            return NotImplemented
        a: Optional[BaseException] = self
        b: Optional[BaseException] = other
        while isinstance(a, ErrorNode) and isinstance(b, ErrorNode):
            if a is b:
                return True
            if a._fields() != b._fields():
                return False
            a, b = a._cause, b._cause
        if a is None or b is None:
            return a is b
        if isinstance(a, ErrorNode) or isinstance(b, ErrorNode):
            return False
        return type(a) is type(b) and str(a) == str(b)

    def __hash__(self) -> int:
        return hash(tuple(
            link._fields() if isinstance(link, ErrorNode) else (type(link).__name__, str(link))
            for link in walk(self)
        ))

    def __reduce__(self):
        # Flattened so pickling a long chain does not recurse once per link.
        links = [
            (type(link), link._fields()) if isinstance(link, ErrorNode) else link
            for link in walk(self)
        ]
        return _rebuild_chain, (links,)


def _rebuild_chain(links: list) -> BaseException:
    """Unpickle a chain flattened by :meth:`ErrorNode.__reduce__`."""
    cause: Optional[BaseException] = None
    for link in reversed(links):
        if isinstance(link, BaseException):
            cause = link
            continue
        cls, (kind, location, message) = link
        cause = cls(message, kind=kind, location=location, cause=cause)
    return cause


class TextError(Exception):
    """Minimal error carrying only a message: no kind, location or cause."""


# =============================================================================
# Construction
# =============================================================================

def new(
    message: Optional[str] = None,
    *,
    kind: Optional[int] = None,
    location: Optional[str] = None,
    cause: Optional[BaseException] = None,
) -> BaseException:
    """
    Build an error node from whichever fields are supplied.

    A *cause* that is not an :class:`ErrorNode` is first wrapped into one
    that keeps only its rendered text.  When *cause* is the only argument
    it is returned unchanged instead of being wrapped in an empty layer.

    Raises :class:`~errchain.exceptions.InvalidConstructionError` when
    called with no arguments, or when *kind* does not fit in a signed
    64-bit integer.  Both are caller bugs; do not catch them.
    """
    if message is None and kind is None and location is None:
        if cause is None:
            raise InvalidConstructionError("errchain.new() called with no arguments")
        return cause

    if cause is not None and not isinstance(cause, ErrorNode):
        cause = ErrorNode(str(cause))

    return ErrorNode(
        message=message or "",
        kind=kind or 0,
        location=location or "",
        cause=cause,
    )


def here(skip: int = 0) -> Location:
    """
    Return the caller's position as ``"<basename>:<line>"``.

    *skip* moves further up the stack, for helpers that build errors on
    behalf of their own caller.
    """
    frame = sys._getframe(1 + skip)
    return Location(f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}")


def text_error(text: str) -> TextError:
    return TextError(text)


def errorf(fmt: str, *args) -> TextError:
    """%-format *fmt* with *args* into a :class:`TextError`."""
    return TextError(fmt % args if args else fmt)


# =============================================================================
# Traversal & kind lookup
# =============================================================================

def walk(err: Optional[BaseException]) -> Iterator[BaseException]:
    """Yield every link from *err* down to the root, outermost first.

    A foreign (non-node) exception ends the chain and is yielded last.
    """
    while err is not None:
        yield err
        err = err.cause if isinstance(err, ErrorNode) else None


def unwrap(err: Optional[BaseException]) -> Optional[BaseException]:
    """Return the cause of a node, or ``None`` for roots and foreign errors."""
    return err.cause if isinstance(err, ErrorNode) else None


def root_cause(err: BaseException) -> BaseException:
    for link in walk(err):
        err = link
    return err


def depth(err: Optional[BaseException]) -> int:
    return sum(1 for _ in walk(err))


def is_kind(err: Optional[BaseException], kind: int) -> bool:
    """True when any node in the chain, at any depth, carries *kind*."""
    return has(err, kind)[1]


def has(err: Optional[BaseException], kind: int) -> Tuple[Optional[ErrorNode], bool]:
    """
    Find the outermost node carrying *kind*.

    Returns ``(node, True)`` on a match, else ``(None, False)``.  Plain
    exceptions never match any kind.
    """
    for link in walk(err):
        if isinstance(link, ErrorNode) and link.kind == kind:
            return link, True
    return None, False
