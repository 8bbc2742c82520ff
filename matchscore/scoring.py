"""
Rule-based skill scoring and score fusion.

final = round_half_up(w_semantic * semantic + w_rule * rule), both inputs on
a 0-100 scale. The weights are the main tuning knob and are never inlined.
"""

import math
from dataclasses import dataclass
from typing import Optional

from .errors import InvariantError
from .semantic import SimilarityScorer, Summarizer, semantic_similarity
from .taxonomy import SkillTaxonomy, default_taxonomy


@dataclass(frozen=True)
class ScoreWeights:
    """Blend weights for the two score components. Must be >= 0 and sum to 1."""

    semantic: float = 0.5
    rule: float = 0.5

    def __post_init__(self):
        if self.semantic < 0 or self.rule < 0:
            raise ValueError(f"Score weights must be non-negative: {self}")
        if not math.isclose(self.semantic + self.rule, 1.0, abs_tol=1e-9):
            raise ValueError(f"Score weights must sum to 1: {self}")

    @classmethod
    def from_semantic(cls, semantic: float) -> "ScoreWeights":
        return cls(semantic=semantic, rule=1.0 - semantic)


DEFAULT_WEIGHTS = ScoreWeights()


@dataclass(frozen=True)
class ScoreComponents:
    semantic_score: float
    rule_score: float


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (77.5 -> 78, 76.5 -> 77)."""
    return int(math.floor(value + 0.5))


def _check_percentage(name: str, value: float):
    if not (0.0 <= value <= 100.0):
        raise InvariantError(f"{name} {value!r} is outside [0, 100]")


def skill_score(job_text: str, resume_text: str, taxonomy: Optional[SkillTaxonomy] = None) -> float:
    """
    Percentage of the job's detected skills also detected in the résumé.

    A job with no detected skills earns full credit (100), by policy.
    """
    taxonomy = taxonomy or default_taxonomy()
    job_skills = {s.lower() for s in taxonomy.detect(job_text)}
    if not job_skills:
        return 100.0
    resume_skills = {s.lower() for s in taxonomy.detect(resume_text)}
    return 100.0 * len(job_skills & resume_skills) / len(job_skills)


def fuse_scores(components: ScoreComponents, weights: ScoreWeights = DEFAULT_WEIGHTS) -> int:
    """
    Blend semantic and rule scores into the final integer percentage.

    Raises:
        InvariantError: If a component or the blended result leaves [0, 100]
    """
    _check_percentage("Semantic score", components.semantic_score)
    _check_percentage("Rule score", components.rule_score)
    blended = weights.semantic * components.semantic_score + weights.rule * components.rule_score
    final = round_half_up(blended)
    if not 0 <= final <= 100:
        raise InvariantError(f"Final score {final} is outside [0, 100]")
    return final


def components_for(
    similarity: float, resume_text: str, job_text: str, taxonomy: Optional[SkillTaxonomy] = None
) -> ScoreComponents:
    """Put a [0, 1] provider similarity and the skill overlap on the shared 0-100 scale."""
    return ScoreComponents(
        semantic_score=similarity * 100,
        rule_score=skill_score(job_text, resume_text, taxonomy),
    )


def score_components(
    resume_text: str,
    job_text: str,
    summarizer: Summarizer,
    scorer: SimilarityScorer,
    taxonomy: Optional[SkillTaxonomy] = None,
) -> ScoreComponents:
    similarity = semantic_similarity(resume_text, job_text, summarizer, scorer)
    return components_for(similarity, resume_text, job_text, taxonomy)


def final_score(
    resume_text: str,
    job_text: str,
    summarizer: Summarizer,
    scorer: SimilarityScorer,
    weights: Optional[ScoreWeights] = None,
    taxonomy: Optional[SkillTaxonomy] = None,
) -> int:
    """Score a résumé against a job: provider similarity fused with skill overlap."""
    components = score_components(resume_text, job_text, summarizer, scorer, taxonomy)
    return fuse_scores(components, weights or DEFAULT_WEIGHTS)
