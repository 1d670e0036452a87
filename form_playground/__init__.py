"""Schema-driven form validation and submission pipeline for the Testing Playground."""
from form_playground.schema.registry import constraint

__all__ = ["constraint"]
__version__ = "0.1.0"
