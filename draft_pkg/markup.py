"""
Markdown rendering: HTML for pages, plain text for the search corpus.
"""

import re

import mistune

PLUGINS = ['table', 'task_lists', 'strikethrough']


def heading_id(text):
    """Derive an anchor id from heading text."""
    plain = re.sub(r'<[^>]+>', '', text)
    slug = re.sub(r'[^\w\s-]', '', plain).strip().lower()
    return re.sub(r'[\s]+', '-', slug)


class DraftRenderer(mistune.HTMLRenderer):
    """HTML renderer with heading anchors and links that open in a new tab."""

    def __init__(self):
        super().__init__(escape=False)

    def heading(self, text, level, **attrs):
        anchor = attrs.get('id') or heading_id(text)
        return '<h{0} id="{1}">{2}</h{0}>\n'.format(level, mistune.escape(anchor), text)

    def link(self, text, url, title=None):
        html = super().link(text, url, title)
        return html.replace('<a ', '<a target="_blank" ', 1)

    def block_code(self, code, info=None):
        escaped_code = mistune.escape(code)
        return '<pre style="white-space: pre-wrap;"><code>{}</code></pre>\n'.format(escaped_code)


class MarkdownProcessor:
    """Converts document bodies with a single pair of mistune parsers."""

    def __init__(self):
        self.markdown_parser = mistune.create_markdown(renderer=DraftRenderer(), plugins=PLUGINS)
        self.ast_parser = mistune.create_markdown(renderer=None, plugins=PLUGINS)

    def to_html(self, text):
        """Convert markdown text to HTML."""
        return self.markdown_parser(text)

    def to_plain_text(self, text):
        """Flatten markdown text to plain text for indexing."""
        parts = []
        self._flatten(self.ast_parser(text), parts)
        return ''.join(parts)

    def _flatten(self, tokens, parts):
        for token in tokens:
            kind = token.get('type')
            children = token.get('children')
            if kind in ('text', 'codespan'):
                parts.append(token.get('raw', ''))
            elif kind == 'block_code':
                parts.append(token.get('raw', ''))
                parts.append('\n')
            elif kind in ('block_html', 'inline_html'):
                continue
            elif kind in ('softbreak', 'linebreak'):
                parts.append('\n')
            elif kind == 'link':
                self._flatten(children or [], parts)
                parts.append(' ({})'.format(token.get('attrs', {}).get('url', '')))
            elif kind == 'heading':
                self._flatten(children or [], parts)
                parts.append('\n')
            elif kind == 'paragraph':
                self._flatten(children or [], parts)
                parts.append('\n\n')
            elif kind == 'list_item':
                parts.append('- ')
                self._flatten(children or [], parts)
                parts.append('\n')
            elif children:
                self._flatten(children, parts)
