"""MCP Server — exposes form_* tools so an agent can drive the playground forms."""
from __future__ import annotations

import json
import os

from mcp.server.fastmcp import FastMCP

from form_playground.config import load_settings
from form_playground.engine import Playground

mcp = FastMCP("form-playground")

_playground: Playground | None = None


def _get_playground() -> Playground:
    """Build the process-wide playground on first use.

    Raises ValueError when .playground/config.yaml or PLAYGROUND_* is invalid.
    """
    global _playground
    if _playground is None:
        try:
            settings = load_settings(os.getcwd())
        except ValueError as e:
            raise ValueError(f"Invalid settings: {e}") from None
        settings.configure_logging()
        _playground = Playground(settings)
    return _playground


def _dump(obj) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, default=str)


def _error(e: Exception) -> str:
    # KeyError str() wraps the message in quotes
    message = e.args[0] if isinstance(e, KeyError) and e.args else str(e)
    return _dump({"error": message})


@mcp.tool()
def form_list() -> str:
    """List available forms with their fields."""
    try:
        pg = _get_playground()
    except ValueError as e:
        return _error(e)
    return _dump({
        name: {
            "label": schema.label,
            "fields": {f.name: {"type": f.type, "required": f.required} for f in schema.fields},
        }
        for name, schema in pg.forms.items()
    })


@mcp.tool()
def form_status(form: str) -> str:
    """Get a form's field values, errors and submission status."""
    try:
        session = _get_playground().session(form)
    except (KeyError, ValueError) as e:
        return _error(e)
    st = session.snapshot()
    st["history"] = session.get_history(5)
    return _dump(st)


@mcp.tool()
def form_set_field(form: str, field: str, value: str | int | float | bool | None = None) -> str:
    """Set one field of a form, as if the user typed or clicked it."""
    try:
        result = _get_playground().session(form).set_field(field, value)
    except (KeyError, ValueError) as e:
        return _error(e)
    return _dump(result.to_dict())


@mcp.tool()
async def form_submit(form: str) -> str:
    """Submit a form and wait for the simulated backend to answer."""
    try:
        session = _get_playground().session(form)
    except (KeyError, ValueError) as e:
        return _error(e)
    result = await session.submit()
    out = result.to_dict()
    out["form_error"] = session.form_error
    return _dump(out)


@mcp.tool()
def form_reset(form: str) -> str:
    """Reset a form to its default values and clear all errors."""
    try:
        return _dump(_get_playground().session(form).reset().to_dict())
    except (KeyError, ValueError) as e:
        return _error(e)


@mcp.tool()
def records_filter(form: str, term: str = "") -> str:
    """List submitted records of a form whose display field contains term."""
    try:
        flt = _get_playground().filter(form)
    except (KeyError, ValueError) as e:
        return _error(e)
    flt.set_filter_term(term)
    return _dump({
        "term": flt.term,
        "display_field": flt.display_field,
        "records": [r.to_dict() for r in flt.visible_records()],
    })


def run_server():
    mcp.run(transport="stdio")
