"""
Pure derivation of what to draw from a :class:`SearchState`.

``build_view`` picks exactly one region (loading, error, prompt, empty or
grid) and, for the grid, turns every record into a :class:`CardView`
holding the ready-to-print pieces of a card.  Nothing here talks to the
network or to Streamlit; the front ends only lay the pieces out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .config import DESCRIPTION_PREVIEW_CHARS, ELLIPSIS, AssessmentItem
from .state import Phase, SearchState

CardKey = Tuple[int, int]


class Region(str, Enum):
    PROMPT = "prompt"
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    GRID = "grid"


def truncate_description(text: str, limit: int = DESCRIPTION_PREVIEW_CHARS) -> Tuple[str, bool]:
    """Return ``(preview, was_truncated)`` for a description."""
    if len(text) <= limit:
        return text, False
    return text[:limit] + ELLIPSIS, True


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


@dataclass(frozen=True)
class CardView:
    key: CardKey
    name: str
    url: str
    description: str
    preview: str
    truncatable: bool
    duration_badge: Optional[str]
    tag_badges: Tuple[str, ...]
    adaptive_badge: Optional[str]
    remote_badge: Optional[str]
    cta_label: str = "View Assessment"

    def description_text(self, expanded: bool) -> str:
        return self.description if expanded or not self.truncatable else self.preview

    @property
    def badges(self) -> List[str]:
        extra = [b for b in (self.adaptive_badge, self.remote_badge) if b]
        return list(self.tag_badges) + extra


def build_card(item: AssessmentItem, key: CardKey) -> CardView:
    preview, truncatable = truncate_description(item.description)
    return CardView(
        key=key,
        name=item.name,
        url=item.url,
        description=item.description,
        preview=preview,
        truncatable=truncatable,
        duration_badge=None if item.duration is None else f"{item.duration} mins",
        tag_badges=tuple(item.test_type),
        adaptive_badge=f"Adaptive: {item.adaptive_support}" if _present(item.adaptive_support) else None,
        remote_badge=f"Remote: {item.remote_support}" if _present(item.remote_support) else None,
    )


@dataclass(frozen=True)
class View:
    region: Region
    message: Optional[str] = None
    cards: Tuple[CardView, ...] = ()


def select_region(state: SearchState) -> Region:
    if state.phase is Phase.LOADING:
        return Region.LOADING
    if state.phase is Phase.ERROR:
        return Region.ERROR
    if not state.has_searched_once:
        return Region.PROMPT
    return Region.GRID if state.results else Region.EMPTY


def build_view(state: SearchState) -> View:
    region = select_region(state)
    if region is Region.LOADING:
        return View(region, "Fetching recommendations...")
    if region is Region.ERROR:
        return View(region, state.error_message)
    if region is Region.PROMPT:
        return View(region, "Describe the role or skills, and we will find the right assessments.")
    if region is Region.EMPTY:
        return View(region, f'No assessments found for "{state.submitted_query}"')
    cards = tuple(build_card(item, (state.result_set, i)) for i, item in enumerate(state.results))
    return View(region, f"{len(cards)} recommended assessments", cards)


@dataclass
class CardToggles:
    """Independent expand/collapse flags, one per card key."""

    _expanded: Dict[CardKey, bool] = field(default_factory=dict)

    def is_expanded(self, key: CardKey) -> bool:
        return self._expanded.get(key, False)

    def toggle(self, key: CardKey) -> bool:
        self._expanded[key] = not self.is_expanded(key)
        return self._expanded[key]

    def prune(self, result_set: int) -> None:
        """Forget flags belonging to result sets other than ``result_set``."""
        self._expanded = {k: v for k, v in self._expanded.items() if k[0] == result_set}

    def __len__(self) -> int:
        return len(self._expanded)


def render_text(view: View, toggles: CardToggles | None = None) -> str:
    """Plain-text rendering of ``view`` for terminals and logs."""
    if toggles is None:
        toggles = CardToggles()
    if view.region is not Region.GRID:
        prefix = "Error: " if view.region is Region.ERROR else ""
        return f"{prefix}{view.message or ''}"

    blocks: List[str] = [view.message or ""]
    for n, card in enumerate(view.cards, 1):
        title = f"{n}. {card.name}"
        if card.duration_badge:
            title += f"  [{card.duration_badge}]"
        lines = [title, "   " + card.description_text(toggles.is_expanded(card.key))]
        if card.badges:
            lines.append("   " + " | ".join(card.badges))
        lines.append(f"   {card.cta_label}: {card.url}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
