"""Tests for autoedit.rendering.sanitize."""

from __future__ import annotations

import pytest

from autoedit.models.config import RenderConfig
from autoedit.models.edl import EDLSegment
from autoedit.rendering.sanitize import (
    check_render_thresholds,
    kept_seconds,
    merge_and_cap,
    min_keep_seconds,
    prepare_edl,
    repair_edl,
    sanitize_edl,
)


def _spans(segments: list[EDLSegment]) -> list[tuple[float, float]]:
    return [(s.start, s.end) for s in segments]


class TestSanitizeEDL:
    def test_clamps_to_duration(self, edl_factory) -> None:
        edl = edl_factory((40.0, 42.5), [(-2.0, 10.0), (45.0, 80.0)], 80.0)
        clean = sanitize_edl(edl, 60.0)
        assert _spans(clean.segments) == [(0.0, 10.0), (45.0, 60.0)]

    def test_rounds_to_milliseconds(self, edl_factory) -> None:
        edl = edl_factory((40.12345, 42.56789), [(1.00049, 9.99951)], 60.0)
        clean = sanitize_edl(edl, 60.0)
        assert (clean.hook.start, clean.hook.end) == (40.123, 42.568)
        assert _spans(clean.segments) == [(1.0, 10.0)]

    def test_hook_widened_to_minimum(self, edl_factory) -> None:
        edl = edl_factory((30.0, 30.1), [(0.0, 10.0)], 60.0)
        clean = sanitize_edl(edl, 60.0)
        assert clean.hook.end - clean.hook.start == pytest.approx(0.25)

    def test_tiny_and_outside_segments_dropped(self, edl_factory) -> None:
        edl = edl_factory((40.0, 42.5), [(0.0, 0.1), (59.9, 70.0), (65.0, 70.0)], 70.0)
        clean = sanitize_edl(edl, 60.0)
        assert clean.segments == []

    def test_idempotent(self, edl_factory) -> None:
        edl = edl_factory(
            (59.8765, 63.2),
            [(-1.0, 3.33333), (10.0004, 10.2), (20.12345, 30.98765), (59.9, 61.0)],
            62.0,
        )
        once = sanitize_edl(edl, 60.0)
        twice = sanitize_edl(once, 60.0)
        assert twice.model_dump() == once.model_dump()

    def test_input_not_mutated(self, edl_factory) -> None:
        edl = edl_factory((40.0, 42.5), [(-2.0, 100.0)], 100.0)
        before = edl.model_dump()
        sanitize_edl(edl, 60.0)
        assert edl.model_dump() == before


class TestThresholds:
    def test_min_keep_seconds(self) -> None:
        assert min_keep_seconds(20.0) == 15.0
        assert min_keep_seconds(100.0) == 25.0
        assert min_keep_seconds(1000.0) == 60.0

    def test_kept_seconds_counts_minimum_hook(self, edl_factory) -> None:
        edl = edl_factory((10.0, 10.1), [(20.0, 30.0)], 60.0)
        assert kept_seconds(edl) == pytest.approx(10.25)

    def test_valid(self, edl_factory) -> None:
        edl = edl_factory((40.0, 42.5), [(0.0, 20.0), (50.0, 60.0)], 100.0)
        check = check_render_thresholds(edl, 100.0)
        assert check.valid
        assert check.kept_sec == pytest.approx(32.5)

    def test_hook_too_short(self, edl_factory) -> None:
        edl = edl_factory((40.0, 40.5), [(0.0, 30.0)], 100.0)
        check = check_render_thresholds(edl, 100.0)
        assert not check.valid
        assert "Hook too short" in check.reason

    def test_hook_too_long(self, edl_factory) -> None:
        edl = edl_factory((40.0, 45.0), [(0.0, 30.0)], 100.0)
        assert "Hook too long" in check_render_thresholds(edl, 100.0).reason

    def test_needs_a_segment(self, edl_factory) -> None:
        edl = edl_factory((40.0, 42.5), [], 100.0)
        assert check_render_thresholds(edl, 100.0).reason == "Fewer than 2 segments"

    def test_too_short(self, edl_factory) -> None:
        edl = edl_factory((40.0, 42.5), [(50.0, 52.0)], 100.0)
        assert check_render_thresholds(edl, 100.0).reason.startswith("Too short")


class TestRepairEDL:
    def test_valid_edl_unchanged(self, edl_factory) -> None:
        edl = edl_factory((40.0, 42.5), [(0.0, 20.0), (50.0, 60.0)], 100.0)
        assert repair_edl(edl, 100.0) is edl

    def test_extends_last_segment(self, edl_factory) -> None:
        edl = edl_factory((50.0, 52.5), [(60.0, 62.0)], 200.0)
        repaired = repair_edl(edl, 200.0)
        assert repaired.segments[-1].end == pytest.approx(107.5)
        assert repaired.segments[-1].reason == "Extended for minimum length"
        assert check_render_thresholds(repaired, 200.0).valid

    def test_extension_stops_at_later_hook(self, edl_factory) -> None:
        edl = edl_factory((30.0, 32.5), [(10.0, 12.0)], 200.0)
        repaired = repair_edl(edl, 200.0)
        assert repaired.segments[-1].end == 30.0

    def test_backbone_after_hook(self, edl_factory) -> None:
        edl = edl_factory((40.0, 42.5), [], 100.0)
        repaired = repair_edl(edl, 100.0)
        assert _spans(repaired.segments) == [(42.5, 70.0)]
        assert repaired.hook.start == 40.0

    def test_full_video_fallback(self, edl_factory) -> None:
        edl = edl_factory((95.0, 97.5), [], 100.0)
        repaired = repair_edl(edl, 100.0)
        assert (repaired.hook.start, repaired.hook.end) == (0.0, 3.0)
        assert _spans(repaired.segments) == [(3.0, 60.0)]

    def test_input_not_mutated(self, edl_factory) -> None:
        edl = edl_factory((50.0, 52.5), [(60.0, 62.0)], 200.0)
        before = edl.model_dump()
        repair_edl(edl, 200.0)
        assert edl.model_dump() == before


class TestMergeAndCap:
    def test_merges_small_gaps(self) -> None:
        segments = [
            EDLSegment(start=0.0, end=1.0, score=0.2, reason="a"),
            EDLSegment(start=1.2, end=2.5, score=0.8, reason="b"),
        ]
        merged = merge_and_cap(segments)
        assert _spans(merged) == [(0.0, 2.5)]
        assert merged[0].score == 0.8
        assert merged[0].reason == "a"

    def test_drops_short(self) -> None:
        segments = [EDLSegment(start=0.0, end=0.5), EDLSegment(start=5.0, end=6.0)]
        assert _spans(merge_and_cap(segments)) == [(5.0, 6.0)]

    def test_caps_by_score_and_keeps_order(self) -> None:
        segments = [
            EDLSegment(start=i * 2.0, end=i * 2.0 + 1.0, score=(i % 10) / 10)
            for i in range(30)
        ]
        capped = merge_and_cap(segments, max_segments=25)
        assert len(capped) == 25
        assert [s.start for s in capped] == sorted(s.start for s in capped)
        assert min(s.score for s in capped) >= 0.1
        dropped = {s.start for s in segments} - {s.start for s in capped}
        assert len(dropped) == 5
        assert all(seg.score <= 0.1 for seg in segments if seg.start in dropped)

    def test_input_not_mutated(self) -> None:
        segments = [EDLSegment(start=0.0, end=1.0), EDLSegment(start=1.1, end=2.0)]
        merge_and_cap(segments)
        assert segments[0].end == 1.0


class TestPrepareEDL:
    def test_valid_edl_is_not_repaired(self, edl_factory) -> None:
        edl = edl_factory((40.0, 42.5), [(0.0, 20.0), (50.0, 60.0)], 100.0)
        prepared = prepare_edl(edl, 100.0)
        assert not prepared.repaired
        assert prepared.check.valid
        assert _spans(prepared.segments) == [(0.0, 20.0), (50.0, 60.0)]

    def test_repairs_short_edl(self, edl_factory) -> None:
        edl = edl_factory((40.0, 42.5), [], 100.0)
        prepared = prepare_edl(edl, 100.0, config=RenderConfig())
        assert prepared.repaired
        assert prepared.check.reason == "Fewer than 2 segments"
        assert _spans(prepared.segments) == [(42.5, 70.0)]
