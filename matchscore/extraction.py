"""
Requirement extraction from job descriptions.

Three independent regex passes (experience duration, education level,
"expertise in X" phrases). Each pass is a pure function of its input:
re.finditer is used instead of a shared stateful scanner.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Tuple

from .errors import InvariantError

EXPERIENCE_PATTERN = re.compile(r"(\d+\s*(?:-\s*\d+)?\s*year[s]?)", re.IGNORECASE)
EDUCATION_PATTERN = re.compile(
    r"\b(B\.?Sc\.?|Bachelor(?:'s)?|Master(?:'s)?|Ph\.?D\.?)\s*(?:in\s*[A-Za-z\s]+)?",
    re.IGNORECASE,
)
EXPERTISE_PATTERN = re.compile(
    r"\b(?:expertise|proficient|experienced)\s+in\s+([A-Za-z0-9 ,]+)",
    re.IGNORECASE,
)
YEAR_COUNT_PATTERN = re.compile(r"(\d+)\s*(?:-\s*\d+)?\s*year", re.IGNORECASE)


@dataclass(frozen=True)
class RequirementPatterns:
    """Compiled patterns for the three passes. Expertise must expose group 1."""

    experience: Pattern = EXPERIENCE_PATTERN
    education: Pattern = EDUCATION_PATTERN
    expertise: Pattern = EXPERTISE_PATTERN


DEFAULT_PATTERNS = RequirementPatterns()


@dataclass(frozen=True)
class RequirementBundle:
    """Non-skill requirements in order of first appearance, duplicates kept."""

    experience: Tuple[str, ...] = field(default_factory=tuple)
    education: Tuple[str, ...] = field(default_factory=tuple)
    expertise: Tuple[str, ...] = field(default_factory=tuple)

    def is_empty(self) -> bool:
        return not (self.experience or self.education or self.expertise)


def _find_experience(text: str, pattern: Pattern) -> Tuple[str, ...]:
    return tuple(m.group(0).strip() for m in pattern.finditer(text))


def _find_education(text: str, pattern: Pattern) -> Tuple[str, ...]:
    return tuple(m.group(0).strip() for m in pattern.finditer(text))


def _find_expertise(text: str, pattern: Pattern) -> Tuple[str, ...]:
    if pattern.groups < 1:
        raise InvariantError(
            f"Expertise pattern {pattern.pattern!r} has no capture group for the phrase"
        )
    phrases: List[str] = []
    for m in pattern.finditer(text):
        phrase = (m.group(1) or "").strip()
        if phrase:
            phrases.append(phrase)
    return tuple(phrases)


def extract_requirements(
    job_text: str, patterns: RequirementPatterns = DEFAULT_PATTERNS
) -> RequirementBundle:
    """
    Pull experience, education and expertise phrases out of a job text.

    Args:
        job_text: Job description body
        patterns: Override for the compiled patterns

    Returns:
        RequirementBundle; categories with no match are empty tuples

    Raises:
        InvariantError: If the expertise pattern cannot yield a phrase group
    """
    text = job_text or ""
    return RequirementBundle(
        experience=_find_experience(text, patterns.experience),
        education=_find_education(text, patterns.education),
        expertise=_find_expertise(text, patterns.expertise),
    )


def parse_year_counts(text: str) -> List[int]:
    """Lower bound of every "N year(s)" / "N-M years" mention, in order."""
    return [int(m.group(1)) for m in YEAR_COUNT_PATTERN.finditer(text or "")]


def required_years(bundle: RequirementBundle) -> Optional[int]:
    """
    Years of experience the job asks for: the largest lower bound among its
    year phrases ("5 years overall, 1 year of Go" requires 5).
    """
    counts = [n for phrase in bundle.experience for n in parse_year_counts(phrase)]
    return max(counts) if counts else None
