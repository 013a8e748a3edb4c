"""Completion engine — the single entry point a host editor calls per keystroke."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from spellhint.adapters.protocol import TextBuffer
from spellhint.core.config import DOCUMENT_KINDS
from spellhint.core.exceptions import ConfigError
from spellhint.models.schema import MetaSchema
from spellhint.services.hierarchy import resolve_hierarchy
from spellhint.services.ranker import Candidate, Ranker
from spellhint.services.resolver import CandidateResolver
from spellhint.services.scanner import ScanContext
from spellhint.services.text import DEFAULT_TAB_SIZE, current_word, is_comment

logger = logging.getLogger(__name__)


class CompletionResult(BaseModel):
    """Ranked candidates plus the column span they replace on the cursor line."""

    candidates: list[Candidate] = Field(default_factory=list)
    replace_from: int
    replace_to: int
    word: str = ""
    hierarchy: list[str] = Field(default_factory=list)


class HintEngine:
    """Schema-driven completion for spell, spells and effects documents.

    The engine keeps no state between calls other than the schema; every
    request rebuilds the hierarchy and context from the buffer.
    """

    def __init__(
        self,
        schema: MetaSchema | None,
        kind: str = "spell",
        tab_size: int = DEFAULT_TAB_SIZE,
    ) -> None:
        if kind not in DOCUMENT_KINDS:
            raise ConfigError(f"Unknown document kind: {kind}")
        self.schema = schema
        self.kind = kind
        self.tab_size = tab_size
        self._resolver = CandidateResolver(schema, kind) if schema is not None else None
        self._ranker = Ranker(schema) if schema is not None else None

    def hierarchy(self, buffer: TextBuffer, line: int, col: int) -> list[str]:
        """Return the key path at a cursor position, outermost first."""
        return resolve_hierarchy(buffer, line, col, self.tab_size)

    def request_completions(
        self,
        buffer: TextBuffer,
        line: int,
        col: int,
        token_end: int | None = None,
    ) -> CompletionResult | None:
        """Compute completions at (line, col), or None when nothing applies.

        ``token_end`` is the end column of the host's token under the cursor;
        the replaced word span is grown outward from it (defaults to ``col``).
        """
        if self._resolver is None or self._ranker is None:
            return None
        if not 0 <= line < buffer.line_count():
            return None
        text = buffer.get_line(line)
        if is_comment(text):
            return None

        start, end, word = current_word(text, col if token_end is None else token_end)
        path = resolve_hierarchy(buffer, line, col, self.tab_size)
        logger.debug("Hierarchy at %d:%d is %s (word %r)", line, col, path, word)

        raw = self._resolver.resolve(ScanContext(buffer, line, col, self.tab_size), path)
        candidates = self._ranker.rank(raw, word)
        if not any(candidate.text != word for candidate in candidates):
            return None
        logger.debug("%d candidates for %s", len(candidates), path)
        return CompletionResult(
            candidates=candidates,
            replace_from=start,
            replace_to=end,
            word=word,
            hierarchy=path,
        )
