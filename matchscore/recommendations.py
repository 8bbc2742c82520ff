"""
Recommendation text for a résumé / job pair.

Output is five newline-delimited lines, parsed downstream by label:

    <opening motivational phrase>
    Improvement Suggestions: <space-joined suggestion sentences>
    Strengths: <comma-joined strength phrases>
    Motivation: <fixed motivation sentence>
    Closing: <fixed closing sentence>

Phrasing is drawn from immutable template tables through an injectable
random source, so tests can pin the exact text with random.Random(seed).
"""

import random
from dataclasses import dataclass
from typing import List, Optional

from .config import DEFAULT_EDUCATION_MARKER
from .extraction import RequirementBundle, extract_requirements, required_years, parse_year_counts
from .taxonomy import SkillTaxonomy, default_taxonomy

OPENING_PHRASES = (
    "Great potential!",
    "You've got this!",
    "Strong foundation!",
    "Impressive background!",
    "You're a great match!",
)

IMPROVEMENT_TEMPLATES = (
    "It might be beneficial to highlight a project or role where you utilized {skill}.",
    "Consider adding a dedicated section that showcases your experience with {skill}.",
    "If you have any certification or training in {skill}, be sure to mention it.",
    "Demonstrate your proficiency in {skill} by detailing specific accomplishments.",
    "Include examples of how you've applied {skill} in practical scenarios.",
)

STRENGTH_TEMPLATES = (
    "Proficient in {skill}",
    "Experienced with {skill}",
    "{skill} expertise is evident",
    "Strong in {skill}",
    "Demonstrates solid skills in {skill}",
)

ALL_SKILLS_COVERED = "Your skills appear to cover all key requirements."
NO_MATCHING_SKILLS = "No directly matching skills identified."
EXPERIENCE_GAP = "Include detailed work experience to meet the required years."
EDUCATION_GAP = "Emphasize your educational background or relevant coursework."
EXPERTISE_GAP = "Mention expertise in {areas} if applicable."
MOTIVATION = "Keep enhancing your expertise and practical experience to excel in your career."
CLOSING = "Overall, your resume shows promise. Focus on these areas to further strengthen your profile!"

SUGGESTIONS_LABEL = "Improvement Suggestions:"
STRENGTHS_LABEL = "Strengths:"
MOTIVATION_LABEL = "Motivation:"
CLOSING_LABEL = "Closing:"


@dataclass(frozen=True)
class SkillGap:
    """Job skills split by whether the résumé mentions them (vocabulary order)."""

    missing: tuple
    matching: tuple


@dataclass(frozen=True)
class RecommendationSections:
    opening: str
    suggestions: str
    strengths: str
    motivation: str
    closing: str


def skill_gap(resume_text: str, job_text: str, taxonomy: Optional[SkillTaxonomy] = None) -> SkillGap:
    taxonomy = taxonomy or default_taxonomy()
    job_skills = taxonomy.detect(job_text)
    resume_keys = {s.lower() for s in taxonomy.detect(resume_text)}
    ordered = taxonomy.ordered(job_skills)
    return SkillGap(
        missing=tuple(s for s in ordered if s.lower() not in resume_keys),
        matching=tuple(s for s in ordered if s.lower() in resume_keys),
    )


def _dedupe(items) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class RecommendationSynthesizer:
    """Builds recommendation text from skill gaps and unmet requirements."""

    def __init__(
        self,
        taxonomy: Optional[SkillTaxonomy] = None,
        rng: Optional[random.Random] = None,
        education_marker: str = DEFAULT_EDUCATION_MARKER,
    ):
        self.taxonomy = taxonomy or default_taxonomy()
        self.rng = rng or random.Random()
        self.education_marker = education_marker.lower()

    def improvement(self, skill: str) -> str:
        return self.rng.choice(IMPROVEMENT_TEMPLATES).format(skill=skill)

    def strength(self, skill: str) -> str:
        return self.rng.choice(STRENGTH_TEMPLATES).format(skill=skill)

    def requirement_gaps(self, resume_text: str, requirements: RequirementBundle) -> List[str]:
        """Sentences for experience, education and expertise the résumé does not show."""
        gaps = []
        resume_lower = resume_text.lower()

        if requirements.experience:
            required = required_years(requirements)
            held = parse_year_counts(resume_text)
            # A year count only counts when it reaches the required years.
            if not held or (required is not None and max(held) < required):
                gaps.append(EXPERIENCE_GAP)

        if requirements.education and self.education_marker not in resume_lower:
            gaps.append(EDUCATION_GAP)

        if requirements.expertise:
            missing = [p for p in _dedupe(requirements.expertise) if p.lower() not in resume_lower]
            if missing:
                gaps.append(EXPERTISE_GAP.format(areas=", ".join(missing)))

        return gaps

    def synthesize(self, resume_text: str, job_text: str) -> str:
        gap = skill_gap(resume_text, job_text, self.taxonomy)
        requirements = extract_requirements(job_text)

        if gap.missing:
            suggestions = [self.improvement(skill) for skill in gap.missing]
        else:
            suggestions = [ALL_SKILLS_COVERED]
        suggestions.extend(self.requirement_gaps(resume_text, requirements))

        if gap.matching:
            strengths = [self.strength(skill) for skill in gap.matching]
        else:
            strengths = [NO_MATCHING_SKILLS]

        opening = self.rng.choice(OPENING_PHRASES)
        return "\n".join([
            opening,
            f"{SUGGESTIONS_LABEL} {' '.join(suggestions)}",
            f"{STRENGTHS_LABEL} {', '.join(strengths)}",
            f"{MOTIVATION_LABEL} {MOTIVATION}",
            f"{CLOSING_LABEL} {CLOSING}",
        ])


def synthesize(
    resume_text: str,
    job_text: str,
    rng: Optional[random.Random] = None,
    taxonomy: Optional[SkillTaxonomy] = None,
    education_marker: str = DEFAULT_EDUCATION_MARKER,
) -> str:
    """Convenience wrapper around RecommendationSynthesizer.synthesize."""
    synthesizer = RecommendationSynthesizer(taxonomy=taxonomy, rng=rng, education_marker=education_marker)
    return synthesizer.synthesize(resume_text, job_text)


def parse_recommendation(text: str) -> RecommendationSections:
    """
    Split recommendation text back into its five sections by label.

    Raises:
        ValueError: If the text does not have the five labelled lines
    """
    lines = text.split("\n")
    labels = (SUGGESTIONS_LABEL, STRENGTHS_LABEL, MOTIVATION_LABEL, CLOSING_LABEL)
    if len(lines) != 5:
        raise ValueError(f"Expected 5 lines of recommendation text, got {len(lines)}")

    values = []
    for line, label in zip(lines[1:], labels):
        if not line.startswith(label):
            raise ValueError(f"Missing '{label}' line in recommendation text")
        values.append(line[len(label):].strip())

    return RecommendationSections(lines[0].strip(), *values)
