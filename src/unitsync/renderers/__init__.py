"""
Renderers turn the service table into human-readable text.
"""

from jinja2 import Environment

from .changes import render as render_changes


def make_environment() -> Environment:
    return Environment(trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True)


__all__ = ["make_environment", "render_changes"]
