"""Process-wide wiring: page forms, one session per page, a shared record store."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from form_playground.config import Settings
from form_playground.engine.gateway import CredentialGateway, SimulatedGateway
from form_playground.engine.session import FormSession
from form_playground.schema.catalog import BUILTIN_FORMS, get_builtin, load_forms
from form_playground.schema.registry import load_constraints
from form_playground.store.records import RecordFilter, RecordStore

if TYPE_CHECKING:
    from collections.abc import Callable

    from form_playground.engine.gateway import Gateway
    from form_playground.types import Schema

logger = logging.getLogger(__name__)

# forms whose fields clear after a successful submit
RESET_ON_SUCCESS = frozenset({"product"})


class Playground:
    def __init__(self, settings: Settings | None = None, store: RecordStore | None = None,
                 gateway_factory: Callable[[Schema], Gateway] | None = None):
        self.settings = settings or Settings()
        self.store = store if store is not None else RecordStore()
        self._gateway_factory = gateway_factory or self._default_gateway
        self._sessions: dict[str, FormSession] = {}
        self._filters: dict[str, RecordFilter] = {}

        if self.settings.constraints_dir:
            load_constraints(self.settings.constraints_dir)
        self.forms: dict[str, Schema] = {name: get_builtin(name) for name in BUILTIN_FORMS}
        if self.settings.forms_dir:
            for name, schema in load_forms(self.settings.forms_dir).items():
                if name in self.forms:
                    logger.warning("project form %s overrides the built-in form", name)
                self.forms[name] = schema

    def schema(self, form: str) -> Schema:
        if form not in self.forms:
            raise KeyError(f'Unknown form "{form}". Available forms: {", ".join(self.forms)}')
        return self.forms[form]

    def session(self, form: str) -> FormSession:
        """Return the page's session, creating it on first use."""
        if form not in self._sessions:
            schema = self.schema(form)
            self._sessions[form] = FormSession(
                schema,
                self._gateway_factory(schema),
                self.store,
                reset_on_success=form in RESET_ON_SUCCESS,
            )
        return self._sessions[form]

    def close_session(self, form: str) -> None:
        """Unmount a page: its pending submission, if any, is discarded."""
        session = self._sessions.pop(form, None)
        if session:
            session.reset()

    def filter(self, form: str) -> RecordFilter:
        if form not in self._filters:
            schema = self.schema(form)
            display = schema.display_field or schema.fields[0].name
            self._filters[form] = RecordFilter(self.store, display, form=form)
        return self._filters[form]

    def _default_gateway(self, schema: Schema) -> Gateway:
        s = self.settings
        if schema.name == "login":
            return CredentialGateway(delay=s.delay, jitter=s.jitter)
        return SimulatedGateway(delay=s.delay, jitter=s.jitter, failure_rate=s.failure_rate)
