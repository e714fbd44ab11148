import logging
from pathlib import Path

from codegen_templates.config import get_settings
from codegen_templates.core.loader import load_defined_templates, load_template
from codegen_templates.models import LoadedTemplate

logger = logging.getLogger(__name__)


def read_template_text(path: str | Path, encoding: str | None = None) -> str:
    file_path = Path(path)
    resolved_encoding = encoding or get_settings().encoding
    try:
        return file_path.read_text(encoding=resolved_encoding)
    except FileNotFoundError:
        raise FileNotFoundError(f"Template file not found: {path}") from None


def load_template_file(
    path: str | Path, named: bool = False, encoding: str | None = None
) -> LoadedTemplate | dict[str, LoadedTemplate]:
    """Load a template file.

    Returns a name -> template mapping when ``named`` is set, else the single
    anonymous template.
    """
    text = read_template_text(path, encoding)
    if named:
        templates = load_defined_templates(text)
        logger.info("Loaded %d named template(s) from %s", len(templates), path)
        return templates

    template = load_template(text)
    logger.info("Loaded template from %s (%d ranges)", path, len(template.ranges))
    return template


def load_templates_from_file(
    path: str | Path, named: bool = False, encoding: str | None = None
) -> dict[str, LoadedTemplate]:
    """Like ``load_template_file`` but always returns a mapping (``""`` for the anonymous template)."""
    loaded = load_template_file(path, named=named, encoding=encoding)
    if isinstance(loaded, LoadedTemplate):
        return {loaded.name: loaded}
    return loaded
