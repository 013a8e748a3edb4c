"""prompt_toolkit completer backed by the spell completion engine."""

from __future__ import annotations

from typing import Iterable

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from spellhint.adapters.buffers import DocumentBuffer
from spellhint.services.engine import HintEngine
from spellhint.services.ranker import Candidate, trim_tags


def _style(candidate: Candidate) -> str:
    if candidate.is_default:
        return "bold"
    if candidate.inherited:
        return "italic"
    return ""


def _meta(candidate: Candidate) -> str:
    return " ".join(trim_tags(line) or "" for line in candidate.description or [])


class SpellCompleter(Completer):
    """Completes keys and values of a multiline spell document at the cursor."""

    def __init__(self, engine: HintEngine) -> None:
        self._engine = engine

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        buffer = DocumentBuffer(document)
        row, col = buffer.cursor
        result = self._engine.request_completions(buffer, row, col)
        if result is None:
            return

        # prompt_toolkit replaces from start_position up to the cursor only,
        # so the word tail after the cursor must already end each candidate
        start_position = result.replace_from - col
        tail = document.current_line[col:result.replace_to]
        for candidate in result.candidates:
            if tail and not candidate.text.endswith(tail):
                continue
            yield Completion(
                candidate.text[: len(candidate.text) - len(tail)],
                start_position=start_position,
                display=candidate.text,
                display_meta=_meta(candidate),
                style=_style(candidate),
            )
