"""
Draft - a static blog generator.

Draft reads a directory of Markdown documents with front matter, builds a
cross-referenced content graph (tags, previous/next, related posts) and
publishes it as HTML pages through Jinja2 templates, plus RSS and Atom feeds,
an XML sitemap and an optional JSON search corpus.
"""

__version__ = "1.0.3"

from .core import Draft
from .graph import ContentGraph, ContentGraphBuilder
from .settings import DraftSettings

__all__ = ['Draft', 'ContentGraph', 'ContentGraphBuilder', 'DraftSettings']
