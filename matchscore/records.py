"""
Match record assembly.

A MatchRecord is the append-only outcome of one scoring request. This module
only builds the value; storage owns its lifecycle.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .errors import InvariantError


@dataclass(frozen=True)
class MatchRecord:
    resume_ref: str
    job_ref: str
    match_score: int
    recommendations: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resume_id": self.resume_ref,
            "job_id": self.job_ref,
            "match_score": self.match_score,
            "recommendations": list(self.recommendations),
        }


def build_record(resume_ref: str, job_ref: str, score: int, recommendation_text: str) -> MatchRecord:
    """
    Wrap a scored match for hand-off to storage.

    The recommendation text becomes a one-element sequence; consumers
    address recommendations positionally.

    Raises:
        InvariantError: If score is not an int in [0, 100]. Scores are never clamped.
    """
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvariantError(f"Match score must be an integer, got {score!r}")
    if not 0 <= score <= 100:
        raise InvariantError(f"Match score {score} is outside [0, 100]")
    return MatchRecord(
        resume_ref=str(resume_ref),
        job_ref=str(job_ref),
        match_score=score,
        recommendations=(recommendation_text,),
    )
