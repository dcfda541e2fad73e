"""Jinja2 template rendering for generated TypeScript files.

Provides the TemplateRenderer class which loads ``.ts.j2`` templates from the
``tsbridge/templates/`` directory.  Every file tsbridge writes into the
destination project (``const.ts``, enums, ``index.ts``) is rendered here so
that the exact output shape lives in one place.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined


_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateRenderer:
    """Renders Jinja2 templates for generated TypeScript sources.

    Output is plain TypeScript, so autoescaping is disabled and whitespace
    control is left to ``trim_blocks``/``lstrip_blocks``: block tags never
    contribute characters to the rendered file.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"enum.ts.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


_renderer: TemplateRenderer | None = None


def get_renderer() -> TemplateRenderer:
    """Return the shared renderer for the bundled templates."""
    global _renderer
    if _renderer is None:
        _renderer = TemplateRenderer()
    return _renderer
