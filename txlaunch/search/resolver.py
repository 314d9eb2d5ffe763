"""
Label Resolver - Turn typed input into a catalog entry.

Resolution order:
  1. Exact (case-insensitive) label match -> Found
  2. Input of 2+ characters contained in one or more labels -> Suggestions,
     ranked by rapidfuzz weighted ratio so the closest label comes first
  3. Otherwise -> NotFound
"""

from dataclasses import dataclass
from typing import Union

from rapidfuzz import fuzz

from txlaunch.services.catalog import Catalog, Entry


MIN_SUGGESTION_LENGTH = 2


@dataclass(frozen=True)
class Found:
    label: str
    entry: Entry


@dataclass(frozen=True)
class Suggestions:
    labels: list


@dataclass(frozen=True)
class NotFound:
    query: str


Resolution = Union[Found, Suggestions, NotFound]


def resolve(text: str, catalog: Catalog) -> Resolution:
    """
    Resolve user input against the catalog.

    Args:
        text: Raw input, any case, surrounding whitespace allowed
        catalog: Catalog keyed by lower-cased label

    Returns:
        Found, Suggestions or NotFound
    """
    query = text.strip().lower()

    entry = catalog.get(query)
    if entry is not None:
        return Found(query, entry)

    if len(query) >= MIN_SUGGESTION_LENGTH:
        candidates = [label for label in catalog if query in label]
        if candidates:
            return Suggestions(_rank(query, candidates))

    return NotFound(query)


def _rank(query: str, labels: list) -> list:
    """Sort labels best match first; ties keep alphabetical order."""
    return sorted(labels, key=lambda label: (-fuzz.WRatio(query, label), label))
