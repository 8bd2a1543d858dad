"""
Jinja2 templates for human-readable output.

Lint explanations (`--explain`, context mode) and the full-mode finding body
are stored as .j2 templates in this directory.
"""

from jinja2 import Environment, FileSystemLoader
from pathlib import Path

_TEMPLATES_DIR = Path(__file__).parent


_env = Environment(
    loader=FileSystemLoader(_TEMPLATES_DIR),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render(template_name: str, **kwargs) -> str:
    """Render a template with given parameters.

    Args:
        template_name: Path relative to the templates dir (e.g., "explain.j2")
        **kwargs: Template variables

    Returns:
        Rendered string
    """
    template = _env.get_template(template_name)
    return template.render(**kwargs)
