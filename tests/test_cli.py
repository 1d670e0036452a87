"""Tests for the playground CLI, run as a subprocess like a user would."""
from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

from conftest import PLAYGROUND_DIR


def run_cli(cwd: Path, *args: str, **env: str) -> tuple[int, str, str]:
    """Run ``python -m form_playground.cli`` and return (exit_code, stdout, stderr)."""
    result = subprocess.run(
        [sys.executable, "-m", "form_playground.cli", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        env={**os.environ, "PLAYGROUND_DELAY": "0", **env},
    )
    return result.returncode, result.stdout, result.stderr


class TestHelpAndRouting:
    def test_help(self, tmp_path):
        code, out, _ = run_cli(tmp_path)
        assert code == 0
        assert "Usage:" in out

    def test_unknown_command(self, tmp_path):
        code, _, err = run_cli(tmp_path, "launch")
        assert code == 1
        assert "Unknown command: launch" in err

    def test_invalid_settings(self, tmp_path):
        code, _, err = run_cli(tmp_path, "forms", PLAYGROUND_FAILURE_RATE="7")
        assert code == 1
        assert "Invalid settings" in err


class TestForms:
    def test_lists_builtin_forms(self, tmp_path):
        code, out, _ = run_cli(tmp_path, "forms")
        assert code == 0
        assert "product — Add Product" in out
        assert "* quantity (number)" in out

    def test_includes_project_forms(self):
        code, out, _ = run_cli(PLAYGROUND_DIR.parent, "forms")
        assert code == 0
        assert "signup — Sign up" in out

    def test_broken_project_form_does_not_hide_the_rest(self, tmp_path):
        forms = tmp_path / ".playground" / "forms"
        forms.mkdir(parents=True)
        (forms / "broken.yaml").write_text("name: broken\nfields: [a\n", encoding="utf-8")
        code, out, err = run_cli(tmp_path, "forms")
        assert code == 0
        assert "product — Add Product" in out
        assert "skipping form broken.yaml" in err


class TestCheck:
    def test_valid_form(self):
        code, out, _ = run_cli(PLAYGROUND_DIR.parent, "check", str(PLAYGROUND_DIR / "forms" / "signup.yaml"))
        assert code == 0
        assert '✓ Form "signup" is valid (4 fields)' in out
        assert "handle: string [required, min_length, check]" in out

    def test_form_with_errors(self, tmp_path):
        form = tmp_path / "bad.yaml"
        form.write_text("name: bad\nfields:\n  - n:\n      type: number\n      min: 5\n      max: 1\n", encoding="utf-8")
        code, out, _ = run_cli(tmp_path, "check", str(form))
        assert code == 1
        assert "min (5) is greater than max (1)" in out

    def test_parse_error(self, tmp_path):
        form = tmp_path / "bad.yaml"
        form.write_text("fields: nope\n", encoding="utf-8")
        code, _, err = run_cli(tmp_path, "check", str(form))
        assert code == 1
        assert "Parse error" in err

    def test_yaml_syntax_error(self, tmp_path):
        form = tmp_path / "bad.yaml"
        form.write_text("name: broken\nfields: [a\n", encoding="utf-8")
        code, _, err = run_cli(tmp_path, "check", str(form))
        assert code == 1
        assert "✗ Parse error: Invalid YAML" in err
        assert "Traceback" not in err

    def test_missing_file(self, tmp_path):
        code, _, err = run_cli(tmp_path, "check", "absent.yaml")
        assert code == 1
        assert "Form file not found" in err


class TestSubmit:
    def test_successful_product(self, tmp_path):
        code, out, _ = run_cli(tmp_path, "submit", "product", "name=Widget", "quantity=3", "color=blue")
        assert code == 0
        assert "✓ Submitted" in out
        assert '"status": "success"' in out

    def test_validation_errors(self, tmp_path):
        code, out, _ = run_cli(tmp_path, "submit", "product", "name=Widget", "quantity=0", "color=blue")
        assert code == 1
        assert "quantity: must be at least 1" in out

    def test_login_with_wrong_password(self, tmp_path):
        code, out, _ = run_cli(tmp_path, "submit", "login", "username=admin", "password=nope")
        assert code == 1
        assert "✗ Invalid username or password" in out

    def test_login_with_demo_credentials(self, tmp_path):
        code, out, _ = run_cli(tmp_path, "submit", "login", "username=admin", "password=test", "remember=on")
        assert code == 0
        assert "Logged in as admin" in out

    def test_bad_assignment(self, tmp_path):
        code, _, err = run_cli(tmp_path, "submit", "product", "name")
        assert code == 1
        assert "Expected key=value" in err

    def test_unknown_field(self, tmp_path):
        code, _, err = run_cli(tmp_path, "submit", "product", "price=3")
        assert code == 1
        assert 'Unknown field "price"' in err
