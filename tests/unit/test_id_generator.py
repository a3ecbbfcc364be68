"""Tests for lg_common.id_generator and lg_common.datetime_utils."""

from datetime import UTC, datetime

import pytest

from src.lg_common.datetime_utils import to_iso, utc_now
from src.lg_common.id_generator import (
    DOCUMENT_ID_RE,
    DocumentIdGenerator,
    generate_id,
    normalize_id,
)


class TestDocumentIdGenerator:
    def test_shape(self) -> None:
        doc_id = DocumentIdGenerator(process_tag=1).next_id()
        assert DOCUMENT_ID_RE.match(doc_id)
        assert doc_id == doc_id.lower()
        assert doc_id.endswith("00000001")

    def test_unique_ids(self) -> None:
        gen = DocumentIdGenerator(process_tag=7)
        assert len({gen.next_id() for _ in range(1000)}) == 1000

    def test_monotonically_increasing(self) -> None:
        gen = DocumentIdGenerator(process_tag=7)
        prev = gen.next_id()
        for _ in range(100):
            current = gen.next_id()
            assert current > prev
            prev = current

    def test_process_tag_range(self) -> None:
        with pytest.raises(ValueError):
            DocumentIdGenerator(process_tag=1 << 32)

    def test_module_default(self) -> None:
        assert DOCUMENT_ID_RE.match(generate_id())


class TestNormalizeId:
    def test_lowercases(self) -> None:
        assert normalize_id("65F0C2AB12CD34EF56789012") == "65f0c2ab12cd34ef56789012"

    @pytest.mark.parametrize("bad", ["", "abc", "65f0c2ab12cd34ef5678901z", "65f0c2ab12cd34ef567890123"])
    def test_malformed(self, bad: str) -> None:
        assert normalize_id(bad) is None


class TestDatetimeUtils:
    def test_utc_now_is_aware(self) -> None:
        assert utc_now().tzinfo == UTC

    def test_to_iso(self) -> None:
        assert to_iso(None) is None
        assert to_iso(datetime(2026, 1, 1)) == "2026-01-01T00:00:00+00:00"
