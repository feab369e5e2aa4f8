"""
Shared fixtures for the errchain test suite.
"""

import sys
from pathlib import Path

import pytest

# Ensure the src/ directory is on the import path so that
# errchain.core.chain / errchain.core.codec / etc. can be imported.
SRC_ROOT = Path(__file__).resolve().parent.parent / "src"
sys.path.insert(0, str(SRC_ROOT))

from errchain import ErrorNode, Kind  # noqa: E402

BAD = Kind(1)
WORSE = Kind(2)
WORST = Kind(3)


# =============================================================================
# Fixtures — sample chains
# =============================================================================

@pytest.fixture
def three_level_chain() -> ErrorNode:
    """
    worst (no message) -> worse -> bad, with fixed locations so byte-exact
    encodings can be asserted.
    """
    a = ErrorNode("things are gonna be bad", kind=BAD, location="errors_test.go:17")
    b = ErrorNode("getErrorForSerialization", kind=WORSE, location="errors_test.go:18", cause=a)
    return ErrorNode("", kind=WORST, location="errors_test.go:19", cause=b)


@pytest.fixture
def three_level_bytes() -> bytes:
    """Binary form of :func:`three_level_chain`."""
    return bytes([
        6, 17, *b"errors_test.go:19", 0,
        4, 17, *b"errors_test.go:18", 24, *b"getErrorForSerialization",
        2, 17, *b"errors_test.go:17", 23, *b"things are gonna be bad",
    ])


@pytest.fixture
def deep_chain() -> ErrorNode:
    """A 5000-link chain, deeper than the interpreter's recursion limit."""
    chain = None
    for i in range(5000):
        chain = ErrorNode(f"level {i}", kind=i % 7, location=f"deep.py:{i}" if i % 3 else "", cause=chain)
    return chain
