"""
Jinja2 template loading for message bodies

Templates live under <templates_dir>/<group>/<name>/ as a template.jinja2
body plus a meta.yaml describing the message (phase, timing, subject).
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import jinja2
import yaml

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


def format_timestamp(iso: str) -> str:
    """Render an ISO 8601 timestamp as 'YYYY-MM-DD HH:MM:SS UTC'"""
    try:
        parsed = datetime.fromisoformat(iso.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return iso
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


class TemplateManager:
    """Manages Jinja2 templates for generated messages"""

    def __init__(self, templates_dir: Optional[Path] = None):
        self.templates_dir = Path(templates_dir or DEFAULT_TEMPLATES_DIR)
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self.templates_dir)),
            autoescape=jinja2.select_autoescape(["html", "xml"]),
            undefined=jinja2.StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["timestamp"] = format_timestamp

    def get_template(self, template_path: str) -> jinja2.Template:
        """Get Jinja2 template by path (e.g., 'emails/service_restored/template.jinja2')"""
        try:
            return self.env.get_template(template_path)
        except jinja2.TemplateNotFound:
            logger.error(f"Template not found: {template_path}")
            raise

    def load_template_meta(self, template_key: str) -> dict[str, Any]:
        """Load template metadata (e.g., 'emails/service_restored' -> meta.yaml)"""
        meta_path = self.templates_dir / template_key / "meta.yaml"

        if not meta_path.exists():
            logger.warning(f"Template metadata not found: {meta_path}")
            return {}

        with open(meta_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def render_template(self, template_key: str, context: dict[str, Any]) -> str:
        """Render <template_key>/template.jinja2 with context"""
        template = self.get_template(f"{template_key}/template.jinja2")
        return template.render(**context).strip("\n")

    def render_string(self, source: str, context: dict[str, Any]) -> str:
        """Render an inline template such as a subject line"""
        return self.env.from_string(source).render(**context).strip()
