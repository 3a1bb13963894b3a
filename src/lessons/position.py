"""
Position token helpers.

The current block of a lesson view is mirrored in an externally visible token
(``#block=<n>`` in the URL fragment) so back/forward navigation can move
through the lesson.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

_TOKEN_RE = re.compile(r"^#?block=([0-9]+)$")


class HistoryMode(str, Enum):
    PUSH = "push"        # append a history entry
    REPLACE = "replace"  # overwrite the current entry


@dataclass(frozen=True)
class DecodedPosition:
    index: int
    canonical: bool  # False when the token was absent, malformed or clamped


def encode_position(index: int) -> str:
    if index < 0:
        raise ValueError(f"block index must be non-negative, got {index}")
    return f"#block={index}"


def decode_position(token: Optional[str]) -> Optional[int]:
    """Return the block index in ``token``, or None when absent or malformed."""
    if not token:
        return None
    match = _TOKEN_RE.match(token.strip())
    if not match:
        return None
    return int(match.group(1))


def clamp_index(index: int, block_count: int) -> int:
    if block_count <= 0:
        return 0
    return max(0, min(index, block_count - 1))


def resolve_position(token: Optional[str], block_count: int) -> DecodedPosition:
    """Decode and clamp ``token``; absent or malformed tokens resolve to 0."""
    raw = decode_position(token)
    if raw is None:
        return DecodedPosition(index=0, canonical=False)
    index = clamp_index(raw, block_count)
    return DecodedPosition(index=index, canonical=index == raw and token.strip().startswith("#"))
