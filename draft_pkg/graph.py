"""
Content graph assembly.

The builder turns loaded sources into resolved Documents, owns the tag index
and the link namespace, and links documents to their chronological
neighbours and declared related documents. The publisher only reads the
resulting ContentGraph.
"""

import logging
from datetime import datetime
from typing import Dict, List

from .errors import DuplicateLinkError, FrontMatterError
from .links import document_url, page_url, tag_url
from .markup import MarkdownProcessor
from .models import Document, StaticPage, Tag, normalize_tag_names
from .validator import validate_front_matter

# Top-level names the publisher writes itself.
RESERVED_OUTPUT_NAMES = ('index.html', 'tags', 'rss.xml', 'atom.xml', 'sitemap.xml')

# RFC 3339: a date-time with a mandatory UTC offset.
TIMESTAMP_FORMATS = ['%Y-%m-%dT%H:%M:%S%z', '%Y-%m-%dT%H:%M:%S.%f%z']


def parse_timestamp(value, path=''):
    """Parse an RFC 3339 timestamp into a timezone-aware datetime."""
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise FrontMatterError(f"Error parsing date for {path}: {value!r} is not an RFC 3339 timestamp")


class ContentGraph:
    """Documents in display order plus the indexes derived from them."""

    def __init__(self, documents, tag_index, namespace, pages, lookup, private_count=0):
        self.documents: List[Document] = documents
        self.tag_index: Dict[Tag, List[Document]] = tag_index
        self.namespace = namespace
        self.pages: List[StaticPage] = pages
        self.lookup: Dict[str, Document] = lookup
        self.private_count = private_count

    def tags_for_display(self):
        """Return (tag, documents) pairs sorted by tag name, newest document first."""
        return [(tag, list(reversed(self.tag_index[tag])))
                for tag in sorted(self.tag_index, key=lambda t: t.name)]


class ContentGraphBuilder:
    """Builds a ContentGraph from sources in loader order."""

    def __init__(self, config, markdown=None):
        self.config = config
        self.markdown = markdown or MarkdownProcessor()
        self.logger = logging.getLogger('Draft.graph')

        self.documents: List[Document] = []
        self.tag_index: Dict[Tag, List[Document]] = {}
        self.namespace = set()
        self.pages: List[StaticPage] = []
        self.lookup: Dict[str, Document] = {}
        self.private_count = 0
        self.reserved = self.reserved_names(config)

    @staticmethod
    def reserved_names(config):
        reserved = set(RESERVED_OUTPUT_NAMES)
        search = config.get('search') or {}
        if search.get('enabled') and search.get('dir'):
            reserved.add(search['dir'])
        return reserved

    def register_link(self, link, kind):
        """Claim a link in the shared namespace, failing on reuse or on a generated output name."""
        if link in self.reserved:
            raise DuplicateLinkError(f"Duplicate link in {kind} {link}: the name is used by generated output")
        if link in self.namespace:
            raise DuplicateLinkError(f"Duplicate link in {kind} {link}")
        self.namespace.add(link)

    def resolve_document(self, source) -> Document:
        front_matter = source.front_matter
        tag_names = normalize_tag_names(front_matter.tags)

        validate_front_matter(front_matter, source.path, source.unknown_headers, tag_names)

        published = parse_timestamp(front_matter.published, source.path)
        tags = [Tag(name, tag_url(self.config, name)) for name in tag_names]

        return Document(
            front_matter=front_matter,
            url=document_url(self.config, front_matter.link),
            html=self.markdown.to_html(source.body),
            text=self.markdown.to_plain_text(source.body),
            published=published,
            tags=tags,
            source_path=source.path,
        )

    def add_source(self, source):
        """Resolve one source and add it to the graph unless it is private."""
        document = self.resolve_document(source)
        self.register_link(document.link, 'post')

        if document.is_private:
            self.private_count += 1
            self.logger.info(f"Post: {document.link} [private] skipping...")
            return None

        self.documents.append(document)
        self.lookup[document.link] = document
        for tag in document.tags:
            self.tag_index.setdefault(tag, []).append(document)
        return document

    def add_sources(self, sources):
        for source in sources:
            self.add_source(source)

    def add_pages(self, pages):
        """Register static pages declared in the configuration."""
        for entry in pages:
            page = StaticPage(
                template=entry['template'],
                title=entry['title'],
                link=entry['link'],
                url=page_url(self.config, entry['link']),
            )
            self.register_link(page.link, 'page')
            self.pages.append(page)

    def build(self) -> ContentGraph:
        """Order documents newest first and back-fill neighbours and related documents."""
        documents = list(reversed(self.documents))

        for i, document in enumerate(documents):
            document.previous = documents[i + 1] if i < len(documents) - 1 else None
            document.next = documents[i - 1] if i > 0 else None

            related = []
            for link in document.front_matter.related:
                target = self.lookup.get(link)
                if target is None:
                    self.logger.warning(
                        f"Post {document.link} lists related link '{link}' which is not a published post; omitting it"
                    )
                    continue
                related.append(target)
            document.related = related

        return ContentGraph(
            documents=documents,
            tag_index=self.tag_index,
            namespace=set(self.namespace),
            pages=list(self.pages),
            lookup=dict(self.lookup),
            private_count=self.private_count,
        )
