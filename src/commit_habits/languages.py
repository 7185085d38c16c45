"""Rank repositories' declared primary languages."""

from __future__ import annotations

from collections.abc import Iterable

from .models import LanguageShare, RawRepository
from .percentages import apportion

TOP_LANGUAGES = 5


def language_counts(repos: Iterable[RawRepository]) -> dict[str, int]:
    """One unit per repository with a declared language, in first-seen order."""
    counts: dict[str, int] = {}
    for repo in repos:
        if repo.language:
            counts[repo.language] = counts.get(repo.language, 0) + 1
    return counts


def language_breakdown(
    repos: Iterable[RawRepository], top_n: int = TOP_LANGUAGES
) -> list[LanguageShare]:
    ranked = sorted(language_counts(repos).items(), key=lambda item: -item[1])
    shares = apportion([count for _, count in ranked])
    return [
        LanguageShare(language=lang, percentage=share, repository_count=count)
        for (lang, count), share in zip(ranked[:top_n], shares)
    ]
