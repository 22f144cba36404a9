"""Tests for autoedit.editing.validate."""

from __future__ import annotations

from autoedit.editing.validate import validate_edl
from autoedit.models.edl import EDLSegment


class TestValidateEDL:
    def test_valid_edl(self, edl_factory) -> None:
        edl = edl_factory((20.0, 22.5), [(0.0, 10.0), (30.0, 40.0)], 60.0)
        result = validate_edl(edl)
        assert result.valid
        assert result.errors == []

    def test_too_little_removed(self, edl_factory) -> None:
        edl = edl_factory((20.0, 22.5), [(0.0, 19.0), (23.0, 59.0)], 60.0)
        result = validate_edl(edl)
        assert not result.valid
        assert any("meaningful edits below threshold" in e for e in result.errors)

    def test_hook_must_move_on_longer_videos(self, edl_factory) -> None:
        edl = edl_factory((1.0, 3.5), [(10.0, 20.0), (30.0, 40.0)], 60.0)
        result = validate_edl(edl)
        assert result.errors == ["No meaningful edits: hook not moved from later in the video"]

    def test_short_videos_keep_hook_at_start(self, edl_factory) -> None:
        edl = edl_factory((0.0, 2.0), [(3.0, 4.0), (5.0, 6.0)], 9.0)
        assert validate_edl(edl).valid

    def test_needs_two_segments(self, edl_factory) -> None:
        edl = edl_factory((20.0, 22.5), [(30.0, 40.0)], 60.0)
        result = validate_edl(edl)
        assert "No meaningful edits: fewer than 2 segments" in result.errors

    def test_collects_every_error(self, edl_factory) -> None:
        edl = edl_factory((20.0, 22.5), [(0.0, 10.0), (30.0, 40.0)], 60.0)
        edl = edl.model_copy(update={
            "version": 2,
            "segments": [
                EDLSegment(start=30.0, end=40.0),
                EDLSegment(start=21.0, end=35.0),
                EDLSegment(start=50.0, end=65.0),
            ],
        })
        errors = validate_edl(edl).errors
        assert "Invalid EDL version" in errors
        assert "Segment 1 overlaps hook" in errors
        assert "Segment 2: out of bounds" in errors
        assert "Segments 0 and 1 out of order" in errors
        assert "Segments 0 and 1 overlap" in errors

    def test_degenerate_hook_and_segment(self, edl_factory) -> None:
        edl = edl_factory((20.0, 22.5), [(0.0, 10.0), (30.0, 40.0)], 60.0)
        edl = edl.model_copy(update={
            "hook": edl.hook.model_copy(update={"start": 5.0, "end": 5.0}),
            "segments": [EDLSegment(start=30.0, end=30.0), EDLSegment(start=40.0, end=45.0)],
        })
        errors = validate_edl(edl).errors
        assert "Invalid hook timing" in errors
        assert "Segment 0: end <= start" in errors

    def test_hook_out_of_bounds(self, edl_factory) -> None:
        edl = edl_factory((58.0, 61.0), [(0.0, 10.0), (30.0, 40.0)], 60.0)
        assert "Hook out of bounds" in validate_edl(edl).errors

    def test_idempotent(self, edl_factory) -> None:
        edl = edl_factory((1.0, 3.5), [(10.0, 10.5)], 60.0)
        assert validate_edl(edl) == validate_edl(edl)
