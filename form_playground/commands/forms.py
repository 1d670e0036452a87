"""playground forms — list the forms a playground serves."""
from __future__ import annotations

from form_playground.engine import Playground


def cmd_forms(playground: Playground):
    for name, schema in playground.forms.items():
        label = f" — {schema.label}" if schema.label else ""
        print(f"{name}{label}")
        for f in schema.fields:
            marker = "*" if f.required else " "
            print(f"  {marker} {f.name} ({f.type})")
