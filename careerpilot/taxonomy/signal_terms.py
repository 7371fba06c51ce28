from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

_REQUIRED_KEYS = (
    "technical_skills",
    "soft_skills",
    "skill_catalog",
    "industry_terms",
    "experience_levels",
    "experience_evidence",
    "requirement_markers",
    "section_headers",
    "education_terms",
    "action_verbs",
)


def _terms(values: Any) -> tuple[str, ...]:
    if not isinstance(values, list):
        return ()
    return tuple(str(item).strip() for item in values if str(item).strip())


def _grouped(values: Any) -> dict[str, tuple[str, ...]]:
    if not isinstance(values, dict):
        return {}
    return {str(key): _terms(items) for key, items in values.items()}


class SignalTaxonomy:
    """Versioned keyword lists backing the text-mining heuristics."""

    def __init__(self, terms_path: str | Path | None = None) -> None:
        path = Path(terms_path) if terms_path else Path(__file__).with_name("signal_terms.yaml")
        raw = self._load_terms(path)

        self.technical_skills = _terms(raw["technical_skills"])
        self.soft_skills = _terms(raw["soft_skills"])
        self.skill_catalog = _grouped(raw["skill_catalog"])
        self.industry_terms = _grouped(raw["industry_terms"])
        self.experience_levels = _grouped(raw["experience_levels"])
        self.experience_evidence = _grouped(raw["experience_evidence"])
        self.requirement_markers = _grouped(raw["requirement_markers"])
        self.section_headers = _grouped(raw["section_headers"])
        self.education_terms = _terms(raw["education_terms"])
        self.action_verbs = _terms(raw["action_verbs"])

    @staticmethod
    def _load_terms(path: Path) -> dict[str, Any]:
        with path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle)
        if not isinstance(raw, dict):
            raise RuntimeError(f"Invalid signal terms file '{path}': expected a top-level mapping.")
        missing = [key for key in _REQUIRED_KEYS if key not in raw]
        if missing:
            raise RuntimeError(f"Signal terms file '{path}' is missing keys: {', '.join(missing)}")
        return raw

    def catalog_skills(self) -> list[str]:
        skills: list[str] = []
        for group in self.skill_catalog.values():
            skills.extend(group)
        return skills

    def header_lookup(self) -> dict[str, str]:
        """Map every lowercase synonym (and canonical name) to its canonical header."""
        lookup: dict[str, str] = {}
        for canonical, synonyms in self.section_headers.items():
            lookup[canonical.lower()] = canonical
            for synonym in synonyms:
                lookup[synonym.lower()] = canonical
        return lookup
