"""Tests for the MCP tool functions, called directly."""
from __future__ import annotations

import asyncio
import json

import pytest

from conftest import ScriptedGateway
from form_playground.config import Settings
from form_playground.engine import Playground
from form_playground.integrations import mcp_server


@pytest.fixture(autouse=True)
def playground(monkeypatch):
    pg = Playground(gateway_factory=lambda schema: ScriptedGateway())
    monkeypatch.setattr(mcp_server, "_playground", pg)
    return pg


def test_form_list():
    forms = json.loads(mcp_server.form_list())
    assert forms["login"]["fields"]["username"] == {"type": "string", "required": True}


def test_fill_submit_and_filter():
    mcp_server.form_set_field("product", "name", "Widget")
    mcp_server.form_set_field("product", "quantity", "4")
    mcp_server.form_set_field("product", "color", "green")

    out = json.loads(asyncio.run(mcp_server.form_submit("product")))
    assert out["success"] is True
    assert out["record"]["values"] == {"name": "Widget", "quantity": 4, "color": "green"}

    listed = json.loads(mcp_server.records_filter("product", "WID"))
    assert [r["values"]["name"] for r in listed["records"]] == ["Widget"]
    assert json.loads(mcp_server.records_filter("product", "gad"))["records"] == []


def test_rejected_submit_reports_field_errors():
    out = json.loads(asyncio.run(mcp_server.form_submit("login")))
    assert out["success"] is False
    assert out["errors"] == {"username": "Username is required", "password": "Password is required"}

    status = json.loads(mcp_server.form_status("login"))
    assert status["fields"]["username"]["error"] == "Username is required"
    assert status["history"][0]["detail"] == "rejected"


def test_reset():
    mcp_server.form_set_field("login", "username", "admin")
    out = json.loads(mcp_server.form_reset("login"))
    assert out["status"] == "idle"
    assert json.loads(mcp_server.form_status("login"))["fields"]["username"]["value"] == ""


@pytest.mark.parametrize("call", [
    lambda: mcp_server.form_status("checkout"),
    lambda: mcp_server.form_set_field("login", "email", "x"),
    lambda: mcp_server.form_reset("checkout"),
    lambda: mcp_server.records_filter("checkout"),
    lambda: asyncio.run(mcp_server.form_submit("checkout")),
])
def test_errors_are_returned_not_raised(call):
    assert "error" in json.loads(call())


def test_unknown_form_message_is_plain():
    out = json.loads(mcp_server.form_status("checkout"))
    assert out["error"].startswith('Unknown form "checkout". Available forms:')


# ─── Lazy playground construction ───

@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.setattr(mcp_server, "_playground", None)
    for var in ("PLAYGROUND_DELAY", "PLAYGROUND_JITTER", "PLAYGROUND_FAILURE_RATE", "PLAYGROUND_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".playground").mkdir()
    return tmp_path


@pytest.mark.parametrize("call", [
    lambda: mcp_server.form_list(),
    lambda: mcp_server.form_status("login"),
    lambda: mcp_server.form_set_field("login", "username", "admin"),
    lambda: mcp_server.form_reset("login"),
    lambda: mcp_server.records_filter("product"),
    lambda: asyncio.run(mcp_server.form_submit("login")),
])
def test_invalid_project_config_is_reported_by_every_tool(project, call):
    (project / ".playground" / "config.yaml").write_text("failure_rate: 7\n", encoding="utf-8")
    out = json.loads(call())
    assert out["error"].startswith("Invalid settings:")
    assert "failure_rate" in out["error"]
    assert mcp_server._playground is None


def test_playground_is_built_from_project_config(project, monkeypatch):
    (project / ".playground" / "config.yaml").write_text("delay: 0\nlog_level: DEBUG\n", encoding="utf-8")
    levels = []
    monkeypatch.setattr(Settings, "configure_logging", lambda self: levels.append(self.log_level))

    forms = json.loads(mcp_server.form_list())

    assert "login" in forms
    assert levels == ["DEBUG"]
    assert mcp_server._playground.settings.delay == 0
