"""UI event handlers organized by feature area.

This package provides handlers for all Gradio UI events, organized into logical modules:
- generator: Prompt submission, delete and download of the generated design
- gallery: Listing, sort order, per-item actions and the detail viewer
- download: Fetch-and-convert helpers shared by both tabs
"""

from . import gallery, generator
from .download import download_design, render_download

__all__ = [
    "download_design",
    "gallery",
    "generator",
    "render_download",
]
