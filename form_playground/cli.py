"""Thin CLI router — dispatches to commands."""
from __future__ import annotations

import os
import sys

USAGE = """\
playground — form validation and submission pipeline of the Testing Playground

Usage:
  playground forms                       List available forms and their fields
  playground check <form.yaml>           Parse a form definition and run static checks
  playground submit <form> key=value...  Fill a form, submit it, print the outcome
  playground mcp-server                  Start the MCP Server (stdio)

Settings come from .playground/config.yaml and PLAYGROUND_* environment variables.
"""


def _load_settings(cwd: str):
    from form_playground.config import load_settings

    try:
        return load_settings(cwd)
    except ValueError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        sys.exit(1)


def _load_playground(cwd: str):
    from form_playground.engine import Playground

    settings = _load_settings(cwd)
    settings.configure_logging()
    return Playground(settings)


def main():
    args = sys.argv[1:]
    cwd = os.getcwd()
    command = args[0] if args else None

    if command == "forms":
        from form_playground.commands.forms import cmd_forms
        cmd_forms(_load_playground(cwd))

    elif command == "check":
        if len(args) < 2:
            print("Usage: playground check <form.yaml>", file=sys.stderr)
            sys.exit(1)
        from form_playground.commands.check import cmd_check
        cmd_check(args[1], _load_settings(cwd).constraints_dir)

    elif command == "submit":
        if len(args) < 2:
            print("Usage: playground submit <form> key=value ...", file=sys.stderr)
            sys.exit(1)
        from form_playground.commands.submit import cmd_submit
        cmd_submit(_load_playground(cwd), args[1], args[2:])

    elif command == "mcp-server":
        from form_playground.integrations.mcp_server import run_server
        run_server()

    elif command in ("help", "--help", "-h", None):
        print(USAGE)

    else:
        print(f"Unknown command: {command}", file=sys.stderr)
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    main()
