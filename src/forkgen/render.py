"""Output rendering: generated statements and the final file text."""

from jinja2 import StrictUndefined, Template

from forkgen.adapters.rust import render_module
from forkgen.config import GenSpecConfig
from forkgen.model import Module


def render_statement(template: str, **variables) -> str:
    """Render a one-line statement template; unknown variables raise."""
    return Template(template, undefined=StrictUndefined).render(**variables)


def render_output(module: Module, config: GenSpecConfig) -> str:
    """Banner, blank line, then the module source ending with a newline."""
    body = render_module(module)
    if not body.endswith("\n"):
        body += "\n"
    return f"{config.banner}\n\n{body}"
