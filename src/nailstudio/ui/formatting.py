"""Formatting helpers that turn state into Markdown and HTML snippets."""

import html
import logging
from datetime import datetime

from nailstudio.core.conversion import DownloadArtifact

logger = logging.getLogger(__name__)

SPANISH_MONTHS = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)


def parse_timestamp(value: str) -> datetime | None:
    """Parse the service's ISO-ish timestamps, returning None when unparseable."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value!r}")
        return None


def format_created_at(value: str, with_time: bool = False) -> str:
    """Format a creation timestamp as a Spanish long date.

    Examples:
        "2026-10-19T14:05:00Z" -> "19 de octubre de 2026"
        with_time=True         -> "19 de octubre de 2026, 14:05"

    Timestamps carrying an offset are shown in the server's local time zone
    (the values above assume a UTC server); naive ones are shown as written. Unparseable
    values are returned unchanged.
    """
    moment = parse_timestamp(value)
    if moment is None:
        return value
    if moment.tzinfo is not None:
        moment = moment.astimezone()

    text = f"{moment.day} de {SPANISH_MONTHS[moment.month - 1]} de {moment.year}"
    if with_time:
        text += f", {moment.hour:02d}:{moment.minute:02d}"
    return text


def render_design_image(
    url: str, alt: str, placeholder_url: str | None = None, css_class: str = "design-image"
) -> str:
    """Build the <img> tag for a design preview.

    With a placeholder, a broken preview is swapped for it once; the handler
    clears itself so a broken placeholder cannot loop.
    """
    attrs = [
        f'src="{html.escape(url, quote=True)}"',
        f'alt="{html.escape(alt, quote=True)}"',
        f'class="{css_class}"',
        'loading="lazy"',
    ]
    if placeholder_url:
        fallback = html.escape(placeholder_url, quote=True)
        attrs.append(f"onerror=\"this.onerror=null;this.src='{fallback}';\"")
    return f"<img {' '.join(attrs)} />"


def render_download_link(artifact: DownloadArtifact | None) -> str:
    """Anchor for a data-URL download; empty when a file is served instead."""
    if artifact is None or not artifact.is_fallback:
        return ""
    href = html.escape(artifact.data_url or "", quote=True)
    name = html.escape(artifact.filename, quote=True)
    return (
        f'<a class="download-fallback" href="{href}" download="{name}">'
        f"Descargar {html.escape(artifact.filename)}</a>"
    )


def format_prompt_markdown(prompt: str) -> str:
    """Prompt block shown above a generated image."""
    return f"### Nail prompt\n\n{prompt}"


def format_design_details(prompt: str, created_at: str) -> str:
    """Details panel of the full-screen viewer."""
    return (
        f"### Nail prompt\n\n{prompt}\n\n"
        f"### Fecha de Creación\n\n{format_created_at(created_at, with_time=True)}"
    )


def format_card_caption(prompt: str, created_at: str, max_length: int = 140) -> str:
    """Short caption under a gallery card (prompt clamped, date without time)."""
    text = prompt if len(prompt) <= max_length else prompt[: max_length - 1].rstrip() + "…"
    return f"{text}\n\n<small>{format_created_at(created_at)}</small>"


def format_error(message: str) -> str:
    """Inline error line, or "" when there is nothing to show."""
    return f"❌ {message}" if message else ""
