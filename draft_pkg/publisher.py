"""
Renders every output artifact from a finished ContentGraph.
"""

import logging
import os
from datetime import datetime

from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound, select_autoescape
from markupsafe import Markup

from . import feeds
from .errors import PublishError, TemplateMissingError
from .models import Badge

SHARED_TEMPLATE = 'shared.html'
SEARCH_TEMPLATE = 'search.html'


def load_badges(badges_dir):
    """Load badge icons into a map of file name to SVG markup."""
    badges = {}
    if not badges_dir:
        return badges
    try:
        names = sorted(os.listdir(badges_dir))
    except (IOError, OSError) as e:
        raise PublishError(f"Failed to read directory '{badges_dir}': {e}")
    for name in names:
        badge_path = os.path.join(badges_dir, name)
        if os.path.isdir(badge_path):
            continue
        try:
            with open(badge_path, 'r', encoding='utf-8') as f:
                badges[name] = Markup(f.read())
        except (IOError, OSError, UnicodeDecodeError) as e:
            raise PublishError(f"Failed to read badge file '{badge_path}': {e}")
    return badges


def format_now(now):
    """e.g. January 2, 2006 at 3:04 PM"""
    hour = now.hour % 12 or 12
    return f"{now:%B} {now.day}, {now:%Y} at {hour}:{now:%M %p}"


class Publisher:
    """Writes HTML pages, feeds, the sitemap and the search corpus."""

    def __init__(self, config, graph, links, badges=None, version='', now=None):
        self.config = config
        self.graph = graph
        self.links = links
        self.badges = badges or {}
        self.version = version
        self.now = now or datetime.now().astimezone()
        self.output_dir = config['output_dir']
        self.templates_dir = config['templates_dir']
        self.logger = logging.getLogger('Draft.publisher')

        self.badge_list = [
            Badge(entry.get('title', ''), entry.get('url', ''), entry.get('icon', ''), entry.get('id', ''))
            for entry in config.get('badges') or []
        ]

        search_path = [self.templates_dir]
        for key in ('index_template_path', 'tags_index_template_path', 'tag_page_template_path'):
            parent = os.path.dirname(config[key])
            if not self._inside_templates(config[key]) and parent not in search_path:
                search_path.append(parent)
        self.env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(['html', 'xml']),
        )

        if not os.path.isfile(os.path.join(self.templates_dir, SHARED_TEMPLATE)):
            raise TemplateMissingError(
                f"Shared layout '{SHARED_TEMPLATE}' not found in templates directory '{self.templates_dir}'"
            )

        self.posts_generated = 0
        self.pages_generated = 0
        self.tags_generated = 0

    def _inside_templates(self, path):
        templates = os.path.abspath(self.templates_dir)
        return os.path.abspath(path).startswith(templates + os.sep)

    def template_name(self, path):
        """Map a configured template path to a name the loader can find."""
        if self._inside_templates(path):
            return os.path.relpath(os.path.abspath(path), os.path.abspath(self.templates_dir)).replace(os.sep, '/')
        return os.path.basename(path)

    def unfurl(self, title, url, description, author='', tags=''):
        return {
            'title': title,
            'url': url,
            'author': author,
            'description': description,
            'site_name': self.config.get('blog_name') or '',
            'tags': tags,
            'locale': self.config.get('locale') or '',
        }

    def base_context(self, title, canonical, unfurl):
        return {
            'config': self.config,
            'labels': {'title': title},
            'unfurl': unfurl,
            'version': self.version,
            'now': format_now(self.now),
            'canonical': canonical,
            'links': self.links,
            'badges': self.badges,
            'badge_list': self.badge_list,
            'pages': self.graph.pages,
            'layout': SHARED_TEMPLATE,
        }

    def render_to(self, template_name, output_dir, context):
        """Render a template into <output_dir>/index.html."""
        output_path = os.path.join(output_dir, 'index.html')
        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound as e:
            raise TemplateMissingError(f"Failed to parse template '{template_name}': template not found ({e})")
        except TemplateError as e:
            raise PublishError(f"Failed to parse template '{template_name}': {e}")

        try:
            rendered_html = template.render(**context)
        except TemplateError as e:
            raise PublishError(f"Failed to execute template '{template_name}' for file '{output_path}': {e}")

        try:
            os.makedirs(output_dir, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as output_file:
                output_file.write(rendered_html)
        except (IOError, OSError) as e:
            raise PublishError(f"Failed to write HTML file {output_path}: {e}")
        self.logger.debug(f"Generated HTML: {output_path}")
        return output_path

    def build_documents(self):
        """Render each accepted document into <output>/<link>/index.html, newest first."""
        for doc in self.graph.documents:
            context = self.base_context(
                doc.title,
                doc.url,
                self.unfurl(doc.title, doc.url, doc.front_matter.description,
                            author=doc.author, tags=','.join(doc.tag_names)),
            )
            context.update({
                'post': doc,
                'content': Markup(doc.html),
                'tags': doc.tags,
            })
            self.render_to(doc.front_matter.template, os.path.join(self.output_dir, doc.link), context)
            self.posts_generated += 1
            self.logger.info(f'Post: "{doc.link}" by {doc.author}')

    def build_index_page(self):
        blog_name = self.config.get('blog_name') or ''
        context = self.base_context(
            blog_name,
            self.links.home,
            self.unfurl(blog_name, self.links.home, self.config.get('description') or ''),
        )
        context['posts'] = self.graph.documents
        path = self.render_to(self.template_name(self.config['index_template_path']), self.output_dir, context)
        self.logger.info(f"Index: {path}")

    def build_tag_pages(self):
        """Build the tags index and one page per tag under <output>/tags/."""
        blog_name = self.config.get('blog_name') or ''
        tags_dir = os.path.join(self.output_dir, 'tags')
        tags = self.graph.tags_for_display()

        context = self.base_context(
            f"{blog_name} Tags",
            self.links.tags,
            self.unfurl(blog_name, self.links.tags, f"{blog_name}: Tags"),
        )
        context['tags'] = tags
        path = self.render_to(self.template_name(self.config['tags_index_template_path']), tags_dir, context)
        self.logger.info(f"Tag Index: {path}")

        tag_template = self.template_name(self.config['tag_page_template_path'])
        for tag, posts in tags:
            context = self.base_context(
                f"{blog_name} Tags",
                tag.url,
                self.unfurl(blog_name, tag.url, f"{blog_name}: Posts tagged {tag.name}"),
            )
            context.update({'tag': tag, 'posts': posts})
            self.render_to(tag_template, os.path.join(tags_dir, tag.name), context)
            self.tags_generated += 1
            self.logger.info(f"Tag: {tag.name}")

    def build_static_pages(self):
        blog_name = self.config.get('blog_name') or ''
        for page in self.graph.pages:
            context = self.base_context(page.title, page.url, self.unfurl(blog_name, page.url, page.title))
            context['page'] = page
            self.render_to(page.template, os.path.join(self.output_dir, page.link), context)
            self.pages_generated += 1
            self.logger.info(f"Page: {page.title}")

    def build_search_page(self):
        search = self.config['search']
        context = self.base_context(self.config.get('blog_name') or '', self.links.home, self.unfurl(
            self.config.get('blog_name') or '', self.links.home, self.config.get('description') or ''))
        context['search'] = search
        path = self.render_to(SEARCH_TEMPLATE, os.path.join(self.output_dir, search['dir']), context)
        self.logger.info(f"Search page: {path}")

    def generate_rss_feed(self):
        path = os.path.join(self.output_dir, 'rss.xml')
        feeds.write_xml(feeds.build_rss(self.config, self.links, self.graph.documents, self.version), path)
        self.logger.info(f"RSS: {path}")

    def generate_atom_feed(self):
        path = os.path.join(self.output_dir, 'atom.xml')
        feeds.write_xml(feeds.build_atom(self.config, self.links, self.graph.documents, self.now), path)
        self.logger.info(f"Atom: {path}")

    def generate_xml_sitemap(self):
        path = os.path.join(self.output_dir, 'sitemap.xml')
        feeds.write_xml(feeds.build_sitemap(self.links, self.graph.pages, self.graph.documents, self.now), path)
        self.logger.info(f"Sitemap: {path}")

    def generate_search_export(self):
        path = self.config['search']['path']
        feeds.write_corpus(feeds.build_corpus(self.config, self.graph.documents, self.now), path)
        self.logger.info(f"Search export: {path}")

    def publish(self):
        """Write every artifact. The graph must already be complete."""
        try:
            os.makedirs(self.output_dir, exist_ok=True)
        except (IOError, OSError) as e:
            raise PublishError(f"Failed to create output directory '{self.output_dir}': {e}")

        self.build_documents()
        self.build_index_page()
        self.build_tag_pages()
        self.generate_rss_feed()
        self.generate_atom_feed()
        self.build_static_pages()
        self.generate_xml_sitemap()
        if self.config['search'].get('enabled'):
            self.generate_search_export()
            self.build_search_page()
