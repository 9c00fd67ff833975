"""
HTML rendering of the gloss view using Jinja2 templates.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Sequence
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader, select_autoescape

from hwaet.core.constants import DICTIONARY_URLS
from hwaet.core.models import Token
from hwaet.processing.layout import layout_tokens


def dictionary_links(lemma: str) -> Dict[str, str]:
    """External dictionary lookups for a headword."""
    encoded = quote(lemma, safe="")
    return {name: template.format(lemma=encoded) for name, template in DICTIONARY_URLS.items()}


def _env(template_dir: Optional[str] = None) -> Environment:
    dir_path = Path(template_dir) if template_dir else Path(__file__).parent / "templates"
    env = Environment(
        loader=FileSystemLoader(str(dir_path)),
        autoescape=select_autoescape(["html", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals["dictionary_links"] = dictionary_links
    return env


def render_html(
    tokens: Sequence[Token],
    title: str = "Hwæt! Glosser",
    template_name: str = "gloss.html.j2",
    template_dir: Optional[str] = None,
) -> str:
    env = _env(template_dir)
    template = env.get_template(template_name)
    return template.render(title=title, items=layout_tokens(tokens))
