"""
Machine-readable outputs: RSS 2.0, Atom, XML sitemap and the search corpus.

Each format has a projection function that turns the ordered document list
into plain records and a writer that serializes those records.
"""

import json
import os
import xml.etree.ElementTree as ET
from email.utils import format_datetime

from .errors import PublishError

SITEMAP_NS = 'http://www.sitemaps.org/schemas/sitemap/0.9'
ATOM_NS = 'http://www.w3.org/2005/Atom'
CORPUS_VERSION = 1


def format_rfc1123(dt):
    """e.g. Fri, 29 Nov 2024 18:29:00 -0800"""
    return format_datetime(dt)


def format_rfc3339(dt):
    """e.g. 2024-11-29T18:29:00-08:00"""
    return dt.isoformat(timespec='seconds')


def _sub(parent, tag, text=None, **attrs):
    element = ET.SubElement(parent, tag, attrs)
    if text is not None:
        element.text = text
    return element


def write_xml(root, path):
    """Serialize an element tree to path with an XML declaration."""
    ET.indent(root, space='  ')
    try:
        ET.ElementTree(root).write(path, encoding='utf-8', xml_declaration=True)
    except (IOError, OSError) as e:
        raise PublishError(f"Failed to write {path}: {e}")


# RSS 2.0

def rss_items(documents):
    return [
        {
            'title': doc.title,
            'link': doc.url,
            'guid': doc.url,
            'description': doc.front_matter.description,
            'author': doc.author,
            'pub_date': format_rfc1123(doc.published),
        }
        for doc in documents
    ]


def build_rss(config, links, documents, version):
    rss = ET.Element('rss', version='2.0')
    channel = _sub(rss, 'channel')
    blog_name = config.get('blog_name') or ''
    _sub(channel, 'title', blog_name)
    _sub(channel, 'link', links.home)
    _sub(channel, 'description', f"Latest posts from {blog_name}")
    _sub(channel, 'language', config.get('language') or '')
    if config.get('rights'):
        _sub(channel, 'copyright', config['rights'])
    _sub(channel, 'generator', f"Draft/{version}")

    for entry in rss_items(documents):
        item = _sub(channel, 'item')
        _sub(item, 'title', entry['title'])
        _sub(item, 'link', entry['link'])
        _sub(item, 'guid', entry['guid'])
        _sub(item, 'description', entry['description'])
        if entry['author']:
            _sub(item, 'author', entry['author'])
        _sub(item, 'pubDate', entry['pub_date'])
    return rss


# Atom

def atom_entries(documents):
    return [
        {
            'title': doc.title,
            'link': doc.url,
            'id': doc.url,
            'published': format_rfc3339(doc.published),
            'updated': format_rfc3339(doc.published),
            'summary': doc.front_matter.description,
            'author_name': doc.author,
            'author_email': doc.front_matter.email,
        }
        for doc in documents
    ]


def build_atom(config, links, documents, now):
    blog_name = config.get('blog_name') or ''
    feed = ET.Element('feed', xmlns=ATOM_NS)
    _sub(feed, 'title', blog_name)
    _sub(feed, 'subtitle', f"Latest posts from {blog_name}")
    _sub(feed, 'link', href=links.atom, rel='self')
    _sub(feed, 'link', href=links.home)
    _sub(feed, 'id', links.home)
    _sub(feed, 'updated', format_rfc3339(now))
    author = _sub(feed, 'author')
    _sub(author, 'name', config.get('author') or blog_name)
    if config.get('email'):
        _sub(author, 'email', config['email'])

    default_author = config.get('author') or blog_name
    for record in atom_entries(documents):
        entry = _sub(feed, 'entry')
        _sub(entry, 'title', record['title'])
        _sub(entry, 'link', href=record['link'])
        _sub(entry, 'id', record['id'])
        _sub(entry, 'published', record['published'])
        _sub(entry, 'updated', record['updated'])
        _sub(entry, 'summary', record['summary'])
        entry_author = _sub(entry, 'author')
        _sub(entry_author, 'name', record['author_name'] or default_author)
        if record['author_email']:
            _sub(entry_author, 'email', record['author_email'])
    return feed


# Sitemap

def sitemap_urls(links, pages, documents, now):
    """Sitemap entries: home, tags, feed, static pages, then documents."""
    today = now.strftime('%Y-%m-%d')
    urls = [
        {'loc': links.home, 'lastmod': today, 'changefreq': 'daily', 'priority': '1.0'},
        {'loc': links.tags, 'lastmod': today, 'changefreq': 'weekly', 'priority': '0.8'},
        {'loc': links.rss, 'lastmod': today, 'changefreq': None, 'priority': '0.7'},
    ]
    for page in pages:
        urls.append({'loc': page.url, 'lastmod': today, 'changefreq': 'monthly', 'priority': '0.5'})
    for doc in documents:
        urls.append({
            'loc': doc.url,
            'lastmod': format_rfc3339(doc.published),
            'changefreq': 'weekly',
            'priority': '0.9',
        })
    return urls


def build_sitemap(links, pages, documents, now):
    urlset = ET.Element('urlset', xmlns=SITEMAP_NS)
    for record in sitemap_urls(links, pages, documents, now):
        url = _sub(urlset, 'url')
        _sub(url, 'loc', record['loc'])
        _sub(url, 'lastmod', record['lastmod'])
        if record['changefreq']:
            _sub(url, 'changefreq', record['changefreq'])
        _sub(url, 'priority', record['priority'])
    return urlset


# Search corpus

def corpus_documents(documents):
    return [
        {
            'ID': doc.url,
            'Title': doc.title,
            'Description': doc.front_matter.description,
            'Text': doc.text,
            'Attributes': {'author': [doc.author], 'tags': doc.tag_names},
            'Hints': [],
        }
        for doc in documents
    ]


def build_corpus(config, documents, now):
    return {
        'Name': config.get('blog_name') or '',
        'URL': config['url'],
        'Created': int(now.timestamp()),
        'Version': CORPUS_VERSION,
        'Documents': corpus_documents(documents),
    }


def write_corpus(corpus, path):
    """Write the search corpus as indented JSON."""
    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(corpus, f, indent=4, ensure_ascii=False)
            f.write('\n')
    except (IOError, OSError) as e:
        raise PublishError(f"Error creating search export file '{path}': {e}")
