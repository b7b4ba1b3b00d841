"""
Controlled tag vocabulary.

The vocabulary is an ordered, duplicate-free tuple of terms built once at
start-up and passed to the fusion stage. A YAML list can replace the
built-in terms.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

import yaml


DEFAULT_TAGS: tuple[str, ...] = (
    "Politics", "Economy", "Health", "Education", "Technology",
    "Environment", "Sports", "Entertainment", "Science", "Business",
    "Culture", "Law", "Social Issues", "Infrastructure", "Agriculture",
    "Energy", "Space", "Automotive", "Fashion", "Travel",
    "Food", "Religion", "Art", "Music", "Film",
    "Literature", "Theatre", "Gaming", "Virtual Reality", "Augmented Reality",
    "Cybersecurity", "Robotics", "AI", "Machine Learning", "Blockchain",
    "Cryptocurrency", "3D Printing", "Mobile Technology", "Telecommunications", "Biotechnology",
    "Pharmaceuticals", "Public Health", "Mental Health", "Wellness", "Fitness",
    "Nutrition", "Diseases", "Epidemics", "Pandemics", "Vaccination",
    "North America", "Latin America", "Caribbean", "Western Europe", "Eastern Europe",
    "Northern Europe", "Southern Europe", "Central Asia", "East Asia", "South Asia",
    "Southeast Asia", "Middle East", "North Africa", "Sub-Saharan Africa", "Australia",
    "New Zealand", "Pacific Islands", "Antarctica", "Global", "International Relations",
    "USA", "Canada", "Mexico", "Brazil", "Argentina",
    "UK", "Germany", "France", "Italy", "Spain",
    "Russia", "China", "India", "Japan", "South Korea",
    "Indonesia", "Nigeria", "South Africa", "Egypt", "Turkey",
    "Iran", "Saudi Arabia", "UAE", "Israel", "Australia",
    "New Zealand", "Pakistan", "Bangladesh", "Vietnam", "Thailand",
    "Breaking News", "Analysis", "Opinion", "Editorial", "Feature",
    "Investigative Reporting", "Interview", "Documentary", "Announcement", "Update",
    "Recap", "Summary", "Preview", "Review", "Commentary",
    "Profile", "Exposé", "Backgrounder", "Fact Check", "Op-Ed",
    "Climate Change", "Global Warming", "Renewable Energy", "Conservation", "Wildlife",
    "Pollution", "Sustainable Development", "Human Rights", "Civil Rights", "Gender Equality",
    "LGBTQ Rights", "Racial Equality", "Immigration", "Refugee Crisis", "Terrorism",
    "War", "Peace Talks", "Nuclear Proliferation", "Espionage", "Cyber Attack",
    "Elections", "Corruption", "Judiciary", "Legislation", "Trade Agreements",
    "Economic Sanctions", "Stock Market", "Recession", "Inflation", "Unemployment",
    "Workplace", "Labor Rights", "Education Reform", "Public Safety", "Crime",
    "Policing", "Legal Trials", "Supreme Court", "Congress", "Parliament",
    "Protests", "Demonstrations", "Festivals", "Awards", "Celebrations",
    "Obituaries", "Memorials", "Anniversaries", "Historical Events", "Archaeological Finds",
)


@dataclass(frozen=True)
class Vocabulary:
    """Ordered set of permitted tag strings."""

    terms: tuple[str, ...]

    @classmethod
    def from_terms(cls, terms: Iterable[str]) -> "Vocabulary":
        cleaned = (str(term).strip() for term in terms)
        return cls(terms=tuple(dict.fromkeys(term for term in cleaned if term)))

    def __contains__(self, tag: object) -> bool:
        return tag in self.terms

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    def as_prompt_list(self) -> str:
        return ", ".join(self.terms)


def load_vocabulary(path: str | None = None) -> Vocabulary:
    """Build the vocabulary from a YAML list file, or the built-in terms.

    Raises:
        ValueError: If the file does not contain a non-empty list
    """
    if not path:
        return Vocabulary.from_terms(DEFAULT_TAGS)

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if isinstance(raw, dict):
        raw = raw.get("tags")
    if not isinstance(raw, list) or not raw:
        raise ValueError(f"Vocabulary file {path} must contain a non-empty list of tags")
    return Vocabulary.from_terms(raw)
