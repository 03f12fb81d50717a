"""
HTML view rendering.

Handlers only see the ``Renderer`` protocol; ``JinjaRenderer`` is the
implementation both services use.
"""

from pathlib import Path
from typing import Any, Optional, Protocol, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class Renderer(Protocol):
    """Turns a named template and its data into an HTML fragment."""

    def render(self, name: str, data: Any) -> bytes:
        ...


class JinjaRenderer:
    """
    Renderer backed by a directory of Jinja2 templates.

    Template ``name`` is loaded from ``<templates_dir>/<name>.html`` and
    receives the view data as ``data``.
    """

    def __init__(self, templates_dir: Optional[Union[str, Path]] = None):
        self.templates_dir = Path(templates_dir) if templates_dir else TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def render(self, name: str, data: Any) -> bytes:
        template = self.env.get_template(f"{name}.html")
        return template.render(data=data).encode("utf-8")
