"""
Tests for match record assembly.
"""

import dataclasses

import pytest

from matchscore.errors import InvariantError
from matchscore.records import MatchRecord, build_record


class TestBuildRecord:
    """Test pure record construction."""

    def test_wraps_recommendation_in_sequence(self):
        record = build_record("resume-1", "job-9", 78, "Great potential!")

        assert record == MatchRecord("resume-1", "job-9", 78, ("Great potential!",))
        assert record.recommendations[0] == "Great potential!"

    def test_to_dict(self):
        record = build_record("resume-1", "job-9", 0, "text")
        assert record.to_dict() == {
            "resume_id": "resume-1",
            "job_id": "job-9",
            "match_score": 0,
            "recommendations": ["text"],
        }

    def test_boundaries_accepted(self):
        assert build_record("r", "j", 0, "t").match_score == 0
        assert build_record("r", "j", 100, "t").match_score == 100

    @pytest.mark.parametrize("score", [101, -1, 77.5, True, "80", None])
    def test_invalid_scores_fail_loudly(self, score):
        with pytest.raises(InvariantError):
            build_record("r", "j", score, "t")

    def test_record_is_immutable(self):
        record = build_record("r", "j", 50, "t")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.match_score = 60
