"""
Skill taxonomy and keyword-based skill detection.

Detection is plain case-insensitive substring containment against a closed
vocabulary. There is no tokenization and no word-boundary check, so short
entries also match inside longer words ("C" in "experience", "Go" in
"good"). That imprecision is accepted behaviour and is kept as-is.
"""

import json
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional

DEFAULT_TAXONOMY_PATH = Path(__file__).parent / "data" / "skills.json"


class SkillTaxonomy:
    """Fixed, versioned vocabulary of skill names grouped by category."""

    def __init__(self, categories: Dict[str, List[str]], version: str = "unversioned"):
        self.version = version
        self.categories: Dict[str, tuple] = {}
        self._skills: List[str] = []
        self._rank: Dict[str, int] = {}

        # Entries differing only by case are one skill; first spelling wins.
        for category, entries in categories.items():
            kept = []
            for entry in entries:
                key = entry.strip().lower()
                if not key or key in self._rank:
                    continue
                self._rank[key] = len(self._skills)
                self._skills.append(entry.strip())
                kept.append(entry.strip())
            self.categories[category] = tuple(kept)

    @property
    def skills(self) -> tuple:
        return tuple(self._skills)

    def __len__(self) -> int:
        return len(self._skills)

    def __contains__(self, skill: str) -> bool:
        return skill.lower() in self._rank

    def detect(self, text: str) -> FrozenSet[str]:
        """Return every vocabulary entry contained in `text` (case-insensitive)."""
        lowered = (text or "").lower()
        return frozenset(skill for skill in self._skills if skill.lower() in lowered)

    def ordered(self, skills: Iterable[str]) -> List[str]:
        """Sort skills into vocabulary order; unknown names go last, alphabetically."""
        known = len(self._skills)
        return sorted(skills, key=lambda s: (self._rank.get(s.lower(), known), s.lower()))

    def category_of(self, skill: str) -> Optional[str]:
        key = skill.lower()
        for category, entries in self.categories.items():
            if any(entry.lower() == key for entry in entries):
                return category
        return None


def load_taxonomy(path: Optional[Path] = None) -> SkillTaxonomy:
    """
    Load a taxonomy from a JSON resource.

    Expected shape: {"version": "...", "categories": {"<name>": ["Skill", ...]}}

    Args:
        path: JSON file (default: the packaged data/skills.json)

    Raises:
        ValueError: If the file does not have the expected shape
    """
    path = Path(path) if path else DEFAULT_TAXONOMY_PATH
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    categories = data.get("categories") if isinstance(data, dict) else None
    if not isinstance(categories, dict) or not categories:
        raise ValueError(f"Taxonomy file {path} has no 'categories' mapping")
    for name, entries in categories.items():
        if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
            raise ValueError(f"Taxonomy category '{name}' must be a list of strings")

    return SkillTaxonomy(categories, version=str(data.get("version", "unversioned")))


_default_taxonomy: Optional[SkillTaxonomy] = None


def default_taxonomy() -> SkillTaxonomy:
    """Return the packaged taxonomy, loading it once."""
    global _default_taxonomy
    if _default_taxonomy is None:
        _default_taxonomy = load_taxonomy()
    return _default_taxonomy


def detect_skills(text: str, taxonomy: Optional[SkillTaxonomy] = None) -> FrozenSet[str]:
    """Detect known skills mentioned in `text`."""
    return (taxonomy or default_taxonomy()).detect(text)
