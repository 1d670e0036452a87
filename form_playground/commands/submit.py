"""playground submit <form> key=value ... — fill a form and submit it once."""
from __future__ import annotations

import asyncio
import json
import sys

from form_playground.engine import Playground


def parse_assignments(args: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {arg!r}")
        values[key] = value
    return values


def cmd_submit(playground: Playground, form: str, args: list[str]):
    try:
        values = parse_assignments(args)
        session = playground.session(form)
        for key, value in values.items():
            session.set_field(key, value)
    except KeyError as e:
        print(e.args[0], file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(e, file=sys.stderr)
        sys.exit(1)

    result = asyncio.run(session.submit())

    mark = "✓" if result else "✗"
    print(f"{mark} {result.message}")
    for name, error in result.errors.items():
        print(f"    {name}: {error}")
    print()
    print(json.dumps(session.snapshot(), ensure_ascii=False, indent=2, default=str))
    if not result:
        sys.exit(1)
