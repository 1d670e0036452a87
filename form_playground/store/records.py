"""In-memory record store and the live substring filter over it."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from form_playground.types import Record

logger = logging.getLogger(__name__)


class RecordStore:
    """Append-only, insertion-ordered sequence of submitted records.

    Mutated only from the event-loop thread; a multi-threaded host must
    serialize append() itself.
    """

    def __init__(self):
        self._records: list[Record] = []
        self._subscribers: list[Callable[[Record], None]] = []

    def append(self, record: Record) -> None:
        self._records.append(record)
        logger.debug("stored %s record #%d", record.form, len(self._records))
        for callback in list(self._subscribers):
            callback(record)

    def subscribe(self, callback: Callable[[Record], None]) -> Callable[[], None]:
        """Call ``callback(record)`` after every append. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return _unsubscribe

    def records(self, form: str | None = None) -> list[Record]:
        if form is None:
            return list(self._records)
        return [r for r in self._records if r.form == form]

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)


class RecordFilter:
    """Filter state plus the derived ``visible_records()`` view.

    Matches ``term`` case-insensitively against each record's display
    field. Nothing is cached: every read walks the full store.
    """

    def __init__(self, store: RecordStore, display_field: str, form: str | None = None):
        self.store = store
        self.display_field = display_field
        self.form = form
        self.term = ""

    def set_filter_term(self, term: str) -> None:
        self.term = term or ""

    def visible_records(self) -> Iterator[Record]:
        needle = self.term.casefold()
        for record in self.store.records(self.form):
            text = record.get(self.display_field)
            if needle in ("" if text is None else str(text)).casefold():
                yield record
