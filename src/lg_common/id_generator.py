"""Document ID generator.

IDs are 24-character lowercase hex strings (same width as the league's
legacy document ids), built from a snowflake-style 64-bit value padded
with a per-process random suffix so ids stay unique across workers.
"""

import re
import secrets
import threading
import time

DOCUMENT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")


class DocumentIdGenerator:
    """Snowflake-style generator rendered as 24 hex chars.

    Layout:
      - 16 hex: 41-bit ms timestamp (since custom epoch) | 12-bit sequence
      -  8 hex: random process tag chosen at construction
    """

    _EPOCH_MS = 1_700_000_000_000
    _SEQUENCE_BITS = 12
    _MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1

    def __init__(self, process_tag: int | None = None) -> None:
        if process_tag is None:
            process_tag = secrets.randbits(32)
        if not (0 <= process_tag < (1 << 32)):
            raise ValueError("process_tag must fit in 32 bits")
        self._process_tag = process_tag
        self._sequence = 0
        self._last_timestamp_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            ts = self._current_ms()
            if ts == self._last_timestamp_ms:
                self._sequence = (self._sequence + 1) & self._MAX_SEQUENCE
                if self._sequence == 0:
                    ts = self._wait_next_ms(ts)
            else:
                self._sequence = 0

            self._last_timestamp_ms = ts
            id_int = ((ts - self._EPOCH_MS) << self._SEQUENCE_BITS) | self._sequence
            return f"{id_int:016x}{self._process_tag:08x}"

    def _current_ms(self) -> int:
        return int(time.time() * 1000)

    def _wait_next_ms(self, last_ts: int) -> int:
        ts = self._current_ms()
        while ts <= last_ts:
            ts = self._current_ms()
        return ts


_default_generator = DocumentIdGenerator()


def generate_id() -> str:
    """Generate a unique document id using the module-level default generator."""
    return _default_generator.next_id()


def normalize_id(value: str) -> str | None:
    """Canonical lowercase form of a document id, or None if malformed."""
    if not DOCUMENT_ID_RE.match(value):
        return None
    return value.lower()
