"""
Canonical URL construction.

Every URL the site publishes goes through build_url, so documents, tags,
static pages and the top-level links always agree on the site root and the
optional base path (which lets a site live at example.com/blog/ rather than
the root of example.com).
"""

from urllib.parse import quote


def build_url(root, base_path=None, segment='', directory=True):
    """
    Build a canonical absolute URL.

    Args:
        root: Site root URL, e.g. https://example.com
        base_path: Optional path prefix, e.g. blog
        segment: Relative segment (document link, tags/<name>, rss.xml, ...)
        directory: True for pages (trailing slash), False for files

    Returns:
        Absolute URL string
    """
    parts = [root.rstrip('/')]
    if base_path and base_path.strip('/'):
        parts.append(base_path.strip('/'))
    if segment:
        parts.append(quote(segment.strip('/'), safe='/'))
    url = '/'.join(parts)
    if directory or not segment:
        url += '/'
    return url


def document_url(config, link):
    return build_url(config['url'], config.get('base_path'), link)


def tag_url(config, tag_name):
    return build_url(config['url'], config.get('base_path'), f"tags/{tag_name}")


def page_url(config, link):
    return build_url(config['url'], config.get('base_path'), link)


class SiteLinks:
    """Top-level canonical URLs, computed once per build."""

    def __init__(self, home, tags, rss, atom, sitemap, rights):
        self.home = home
        self.tags = tags
        self.rss = rss
        self.atom = atom
        self.sitemap = sitemap
        self.rights = rights

    @classmethod
    def from_config(cls, config):
        root = config['url']
        base_path = config.get('base_path')
        return cls(
            home=build_url(root, base_path),
            tags=build_url(root, base_path, 'tags'),
            rss=build_url(root, base_path, 'rss.xml', directory=False),
            atom=build_url(root, base_path, 'atom.xml', directory=False),
            sitemap=build_url(root, base_path, 'sitemap.xml', directory=False),
            rights=build_url(root, base_path, 'rights'),
        )

    def as_dict(self):
        return {
            'home': self.home,
            'tags': self.tags,
            'rss': self.rss,
            'atom': self.atom,
            'sitemap': self.sitemap,
            'rights': self.rights,
        }
