"""playground check <schema.yaml> — parse a form definition and run static checks."""
from __future__ import annotations

import sys
from pathlib import Path

from form_playground.schema import check_schema, format_issues, load_constraints, parse_schema_yaml


def cmd_check(schema_file: str, constraints_dir: str | Path | None = None):
    path = Path(schema_file)
    if not path.exists():
        print(f"Form file not found: {path}", file=sys.stderr)
        sys.exit(1)

    if constraints_dir:
        load_constraints(constraints_dir)

    try:
        schema = parse_schema_yaml(path.read_text(encoding="utf-8"))
    except ValueError as e:
        print(f"✗ Parse error: {e}", file=sys.stderr)
        sys.exit(1)

    issues = check_schema(schema, strict_checks=constraints_dir is not None)
    if any(i.level == "error" for i in issues):
        print(f'✗ Form "{schema.name}" failed validation:')
        print(format_issues(issues))
        sys.exit(1)

    print(f'✓ Form "{schema.name}" is valid ({len(schema)} fields)')
    if issues:
        print(format_issues(issues))
    print()
    for f in schema.fields:
        flags = ["required"] if f.required else []
        flags.extend(c.kind for c in f.constraints)
        print(f"  {f.name}: {f.type}" + (f" [{', '.join(flags)}]" if flags else ""))
