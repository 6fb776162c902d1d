"""
Data records shared by the loader, the content graph and the publisher.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from .errors import FrontMatterError

PUBLIC = 'public'
PRIVATE = 'private'
VALID_STATUSES = (PUBLIC, PRIVATE)


class FrontMatter:
    """The recognised headers of a document, each present or empty."""

    STRING_FIELDS = (
        'title', 'link', 'description', 'image', 'alt', 'published',
        'template', 'favicon', 'author', 'email', 'status',
    )
    LIST_FIELDS = ('tags', 'related')
    # Not trimmed: the link-safety policy rejects surrounding whitespace.
    VERBATIM_FIELDS = ('link',)

    def __init__(self, **fields):
        for name in self.STRING_FIELDS:
            setattr(self, name, fields.pop(name, ''))
        for name in self.LIST_FIELDS:
            setattr(self, name, list(fields.pop(name, [])))
        if fields:
            raise TypeError(f"Unknown front matter fields: {', '.join(sorted(fields))}")

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Any]) -> Tuple['FrontMatter', List[str]]:
        """
        Build a record from a parsed metadata mapping.

        Returns:
            Tuple of (front_matter, unknown_keys)
        """
        fields = {}
        unknown = []
        for key, value in mapping.items():
            key = str(key).strip()
            if key in cls.STRING_FIELDS:
                fields[key] = _as_string(key, value, strip=key not in cls.VERBATIM_FIELDS)
            elif key in cls.LIST_FIELDS:
                fields[key] = _as_list(key, value)
            else:
                unknown.append(key)
        return cls(**fields), unknown

    def __repr__(self):
        return f"FrontMatter(link={self.link!r}, title={self.title!r})"


def _as_string(key, value, strip=True):
    if value is None:
        return ''
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, dict)):
        raise FrontMatterError(f"header '{key}' must be a single value")
    value = str(value)
    return value.strip() if strip else value


def _as_list(key, value):
    # Lists may be written as YAML sequences or as "a, b, c".
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(',')
    elif isinstance(value, list):
        items = value
    else:
        raise FrontMatterError(f"header '{key}' must be a list or a comma-separated string")
    result = []
    for item in items:
        if isinstance(item, (list, dict)):
            raise FrontMatterError(f"header '{key}' contains a nested value: {item!r}")
        if item is None:
            continue
        item = str(item).strip()
        if item:
            result.append(item)
    return result


class Tag:
    """A tag name and its canonical URL. Two tags are the same tag if their names match."""

    def __init__(self, name: str, url: str):
        self.name = name
        self.url = url

    def __eq__(self, other):
        if not isinstance(other, Tag):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return f"Tag({self.name!r})"


def normalize_tag_names(names):
    """Trim and lower-case tag names, dropping empties and repeats."""
    seen = []
    for name in names:
        name = name.strip().lower()
        if name and name not in seen:
            seen.append(name)
    return seen


class Document:
    """A fully resolved document in the content graph."""

    def __init__(self, front_matter: FrontMatter, url: str, html: str, text: str,
                 published: datetime, tags: List[Tag], source_path: str = ''):
        self.front_matter = front_matter
        self.url = url
        self.html = html
        self.text = text
        self.published = published
        self.pub_date = published.strftime('%d-%b-%Y')
        self.tags = tags
        self.source_path = source_path
        self.previous: Optional['Document'] = None
        self.next: Optional['Document'] = None
        self.related: List['Document'] = []

    @property
    def link(self):
        return self.front_matter.link

    @property
    def title(self):
        return self.front_matter.title

    @property
    def author(self):
        return self.front_matter.author

    @property
    def is_private(self):
        return self.front_matter.status == PRIVATE

    @property
    def tag_names(self):
        return [tag.name for tag in self.tags]

    def __repr__(self):
        return f"Document({self.link!r})"


class StaticPage:
    """An auxiliary page declared in the site configuration."""

    def __init__(self, template: str, title: str, link: str, url: str = ''):
        self.template = template
        self.title = title
        self.link = link
        self.url = url

    def __repr__(self):
        return f"StaticPage({self.link!r})"


class Badge:
    """A badge shown in the page layout, e.g. a link to a profile."""

    def __init__(self, title: str, url: str, icon: str, id: str = ''):
        self.title = title
        self.url = url
        self.icon = icon
        self.id = id

    def __repr__(self):
        return f"Badge({self.title!r})"
