import re
from dataclasses import dataclass, field

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from courseoverview.core.config import TEMPLATES_DIR
from courseoverview.lang import get_string

_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(markup: str) -> str:
    """Turn rendered markup into one line: every whitespace run becomes a single space."""
    return _WHITESPACE.sub(" ", markup)


class PageRequirements:
    """Script sink of one page response."""

    def __init__(self):
        self._init_code: list[str] = []

    def js_init_code(self, code: str, on_dom_ready: bool = False) -> None:
        if on_dom_ready:
            code = 'document.addEventListener("DOMContentLoaded", function() {\n' + code + "\n});"
        self._init_code.append(code)

    def get_end_code(self) -> str:
        return "\n".join(self._init_code)


@dataclass
class PageContext:
    """What the footer hook knows about the page being rendered."""

    pagetype: str
    user_id: int | None = None
    requires: PageRequirements = field(default_factory=PageRequirements)


class TemplateRenderer:
    def __init__(self, templates_dir=TEMPLATES_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals["get_string"] = get_string

    def render_from_template(self, name: str, context: dict) -> str:
        return self.env.get_template(name).render(**context)
