"""Built-in page forms, plus project forms loaded from a directory."""
from __future__ import annotations

import logging
from pathlib import Path

from form_playground.schema.checker import ensure_valid
from form_playground.schema.parser import parse_schema_yaml
from form_playground.types import Schema

logger = logging.getLogger(__name__)

LOGIN_FORM = """\
name: login
label: Login
display: username
fields:
  - username:
      required: true
      message: Username is required
  - password:
      required: true
      message: Password is required
  - remember:
      type: boolean
      default: false
"""

SETTINGS_FORM = """\
name: settings
label: Form Elements
display: username
fields:
  - username:
      required: true
      message: Username must be at least 2 characters
      min_length:
        value: 2
        message: Username must be at least 2 characters
  - email:
      required: true
      message: Invalid email address
      email: Invalid email address
  - age:
      type: number
      required: true
      default: 18
      min:
        value: 18
        message: Must be at least 18 years old
  - terms:
      type: boolean
      default: false
      accepted: You must accept the terms
  - role:
      required: true
      message: Please select a role
      one_of: [admin, user, manager]
"""

PRODUCT_FORM = """\
name: product
label: Add Product
display: name
fields:
  - name:
      label: Product name
      required: true
  - quantity:
      type: number
      required: true
      min: 1
  - color:
      required: true
      message: Please select a color
      one_of: [red, green, blue]
"""

BUILTIN_FORMS: dict[str, str] = {
    "login": LOGIN_FORM,
    "settings": SETTINGS_FORM,
    "product": PRODUCT_FORM,
}

_CACHE: dict[str, Schema] = {}


def get_builtin(name: str) -> Schema:
    """Parse (once) and return a built-in form schema."""
    if name not in BUILTIN_FORMS:
        raise KeyError(f'Unknown form "{name}". Available forms: {", ".join(BUILTIN_FORMS)}')
    if name not in _CACHE:
        _CACHE[name] = ensure_valid(parse_schema_yaml(BUILTIN_FORMS[name]))
    return _CACHE[name]


def load_forms(forms_dir: str | Path) -> dict[str, Schema]:
    """Load every *.yaml form in a directory; invalid files are logged and skipped."""
    forms: dict[str, Schema] = {}
    path = Path(forms_dir)
    if not path.is_dir():
        return forms
    for yaml_file in sorted(path.glob("*.yaml")):
        try:
            schema = ensure_valid(parse_schema_yaml(yaml_file.read_text(encoding="utf-8")))
        except ValueError as e:
            logger.warning("skipping form %s: %s", yaml_file.name, e)
            continue
        forms[schema.name] = schema
    return forms
