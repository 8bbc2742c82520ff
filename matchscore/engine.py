"""
Match scoring engine: the surface used by callers (CLI, web routes).

compute_match validates the texts, gets the semantic component from the
provider, computes the rule-based skill score, fuses both and writes the
recommendation text. score_and_record additionally builds and persists a
MatchRecord, strictly after every score component has resolved.
"""

import random
from dataclasses import dataclass
from typing import Optional

from .config import DEFAULT_EDUCATION_MARKER, Settings
from .errors import ProviderError
from .logger import get_logger
from .providers import HuggingFaceClient
from .recommendations import RecommendationSynthesizer
from .records import MatchRecord, build_record
from .schema import require_valid_inputs
from .scoring import DEFAULT_WEIGHTS, ScoreComponents, ScoreWeights, components_for, fuse_scores
from .semantic import SimilarityScorer, Summarizer, semantic_match
from .storage import MatchStore
from .taxonomy import SkillTaxonomy, default_taxonomy, load_taxonomy

logger = get_logger()


@dataclass(frozen=True)
class MatchResult:
    final_score: int
    recommendation_text: str
    components: ScoreComponents
    resume_summary: str = ""
    job_summary: str = ""

    def to_dict(self) -> dict:
        return {
            "match_score": self.final_score,
            "recommendations": [self.recommendation_text],
            "semantic_score": self.components.semantic_score,
            "rule_score": self.components.rule_score,
            "resume_summary": self.resume_summary,
            "job_summary": self.job_summary,
        }


class MatchEngine:
    """Scores résumé/job pairs using injected summarize/similarity capabilities."""

    def __init__(
        self,
        summarizer: Summarizer,
        scorer: SimilarityScorer,
        taxonomy: Optional[SkillTaxonomy] = None,
        weights: Optional[ScoreWeights] = None,
        rng: Optional[random.Random] = None,
        education_marker: Optional[str] = None,
    ):
        self.summarizer = summarizer
        self.scorer = scorer
        self.taxonomy = taxonomy or default_taxonomy()
        self.weights = weights or DEFAULT_WEIGHTS
        self.synthesizer = RecommendationSynthesizer(
            taxonomy=self.taxonomy,
            rng=rng,
            education_marker=education_marker or DEFAULT_EDUCATION_MARKER,
        )

    @classmethod
    def from_settings(cls, settings: Settings, rng: Optional[random.Random] = None) -> "MatchEngine":
        """Engine backed by the Hugging Face client, configured from settings."""
        client = HuggingFaceClient(settings)
        taxonomy = load_taxonomy(settings.taxonomy_path) if settings.taxonomy_path else None
        return cls(
            summarizer=client,
            scorer=client,
            taxonomy=taxonomy,
            weights=ScoreWeights.from_semantic(settings.semantic_weight),
            rng=rng,
            education_marker=settings.education_marker,
        )

    def compute_match(self, resume_text: str, job_text: str) -> MatchResult:
        """
        Score a résumé against a job description.

        Raises:
            InputError: Empty or missing text; no provider call is made
            ProviderError: Summarization or similarity failed
            InvariantError: A score left [0, 100]
        """
        require_valid_inputs(resume_text, job_text)

        try:
            semantic = semantic_match(resume_text, job_text, self.summarizer, self.scorer)
        except ProviderError as e:
            logger.error("Semantic similarity unavailable", capability=e.capability, status=e.status, error=str(e))
            raise

        components = components_for(semantic.score, resume_text, job_text, self.taxonomy)
        final = fuse_scores(components, self.weights)
        text = self.synthesizer.synthesize(resume_text, job_text)

        logger.record_match_scored()
        logger.info(
            "Computed match score",
            final_score=final,
            semantic_score=round(components.semantic_score, 2),
            rule_score=round(components.rule_score, 2),
        )
        return MatchResult(
            final_score=final,
            recommendation_text=text,
            components=components,
            resume_summary=semantic.resume_summary,
            job_summary=semantic.job_summary,
        )

    def score_and_record(
        self,
        resume_ref: str,
        job_ref: str,
        resume_text: str,
        job_text: str,
        store: Optional[MatchStore] = None,
    ) -> MatchRecord:
        """Compute a match, build its record and persist it when a store is given."""
        result = self.compute_match(resume_text, job_text)
        record = build_record(resume_ref, job_ref, result.final_score, result.recommendation_text)
        if store is not None:
            store.save(record)
        return record


def compute_match(
    resume_text: str,
    job_text: str,
    summarizer: Summarizer,
    scorer: SimilarityScorer,
    **engine_options,
) -> MatchResult:
    """One-shot scoring without keeping an engine around."""
    return MatchEngine(summarizer, scorer, **engine_options).compute_match(resume_text, job_text)
