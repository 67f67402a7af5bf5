"""Search box state: type-ahead suggestions, keyboard navigation, share links."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from urllib.parse import quote

from .config import get_settings, get_vocabulary

MAX_SUGGESTIONS = 6
NO_SELECTION = -1


def suggest(
    text: str,
    vocabulary: Iterable[str] | None = None,
    limit: int = MAX_SUGGESTIONS,
) -> list[str]:
    """Vocabulary entries containing ``text``, excluding an exact match."""
    if not text.strip():
        return []
    if vocabulary is None:
        vocabulary = get_vocabulary().suggestions

    needle = text.casefold()
    matches = [
        word for word in vocabulary
        if needle in word.casefold() and word.casefold() != needle
    ]
    return matches[:limit]


def share_url(query: str, base: str = "/") -> str | None:
    """Shareable link carrying the query, or None for a blank query."""
    query = query.strip()
    if not query:
        return None
    return f"{base}?q={quote(query, safe='')}"


def query_from_params(params: Mapping[str, str], default: str | None = None) -> str:
    """Active query from request parameters."""
    return params.get("q") or default or get_settings().default_query


@dataclass(frozen=True)
class SearchBox:
    """Search input state.

    Every transition returns ``(state, committed_query)``; the query is None
    unless the transition submits a search.
    """
    input_value: str = ""
    suggestions: tuple[str, ...] = ()
    selected_index: int = NO_SELECTION
    show_suggestions: bool = False
    vocabulary: tuple[str, ...] | None = None

    def type(self, value: str) -> tuple["SearchBox", str | None]:
        matches = tuple(suggest(value, self.vocabulary)) if value.strip() else ()
        return replace(
            self,
            input_value=value,
            suggestions=matches,
            selected_index=NO_SELECTION,
            show_suggestions=bool(matches),
        ), None

    def key(self, key: str) -> tuple["SearchBox", str | None]:
        if not self.show_suggestions:
            return self, None

        if key == "ArrowDown":
            if self.selected_index < len(self.suggestions) - 1:
                return replace(self, selected_index=self.selected_index + 1), None
            return self, None
        if key == "ArrowUp":
            if self.selected_index > 0:
                return replace(self, selected_index=self.selected_index - 1), None
            return self, None
        if key == "Enter" and self.selected_index >= 0:
            return self.choose(self.suggestions[self.selected_index])
        if key == "Escape":
            return replace(self, show_suggestions=False), None
        return self, None

    def focus(self) -> tuple["SearchBox", str | None]:
        if self.input_value and self.suggestions:
            return replace(self, show_suggestions=True), None
        return self, None

    def click_outside(self) -> tuple["SearchBox", str | None]:
        return replace(self, show_suggestions=False), None

    def choose(self, suggestion: str) -> tuple["SearchBox", str | None]:
        return replace(self, input_value=suggestion).submit()

    def submit(self) -> tuple["SearchBox", str | None]:
        query = self.input_value.strip()
        if not query:
            return self, None
        return replace(self, show_suggestions=False), query
