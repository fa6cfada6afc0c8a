"""Render the JavaScript entry point shipped at the root of each bundle."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

SHIM_PACKAGE = "next-aws-cloudfront"
HANDLER_TEMPLATES: dict[str, str] = {
    "default": "default-handler.js.jinja",
    "api": "api-handler.js.jinja",
}


class HandlerRenderer:
    """Render bundle entry points from Jinja templates."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the renderer.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing the handler templates; defaults to the
            package's ``templates`` directory.
        """
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, bundle: str, *, manifest_filename: str) -> str:
        """Return the entry point source for ``bundle``."""
        try:
            template_name = HANDLER_TEMPLATES[bundle]
        except KeyError as exc:
            known = ", ".join(sorted(HANDLER_TEMPLATES))
            msg = f"Unknown bundle '{bundle}'. Known bundles: {known}"
            raise KeyError(msg) from exc
        template = self.env.get_template(template_name)
        return template.render(
            bundle=bundle,
            manifest_filename=manifest_filename,
            shim_package=SHIM_PACKAGE,
        )


def default_shim_path() -> Path:
    """Return the compatibility shim bundled with this package."""
    return Path(__file__).parent / "runtime" / SHIM_PACKAGE / "index.js"


__all__ = ["HANDLER_TEMPLATES", "HandlerRenderer", "SHIM_PACKAGE", "default_shim_path"]
