from __future__ import annotations

from datetime import date
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


class EmailRenderer:
    """Renders the HTML bodies of outgoing emails."""

    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self._env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, template_name: str, **context) -> str:
        context.setdefault("year", date.today().year)
        return self._env.get_template(template_name).render(**context)
