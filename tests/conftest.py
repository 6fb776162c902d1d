"""Test configuration and fixtures for Draft tests."""

import logging
import pytest
import tempfile
import shutil
import os
from pathlib import Path

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


def render_post(title, link, published, tags='', status='public', related=None,
                template='post.html', description='A post', author='Jane Doe',
                email='jane@example.com', body='Some *body* text.'):
    """Build the text of a YAML-framed source document."""
    lines = [
        '---',
        f'title: "{title}"',
        f'link: {link}',
        f'description: "{description}"',
        f'tags: "{tags}"',
        f'published: "{published}"',
        f'template: {template}',
        f'author: {author}',
        f'email: {email}',
        f'status: {status}',
    ]
    if related:
        lines.append('related:')
        lines.extend(f'  - {item}' for item in related)
    lines.append('---')
    lines.append('')
    lines.append(body)
    return '\n'.join(lines) + '\n'


@pytest.fixture(autouse=True)
def reset_draft_logger():
    """Drop handlers bound to a previous test's captured streams."""
    yield
    logger = logging.getLogger('Draft')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def mock_input_dir(temp_dir):
    """Create an empty source directory."""
    input_dir = Path(temp_dir) / 'posts'
    input_dir.mkdir()
    return str(input_dir)


@pytest.fixture
def write_post(mock_input_dir):
    """Return a function that writes a source document into the input directory."""
    def _write(filename, title=None, link='post', published='2024-01-01T09:00:00-08:00', **kwargs):
        path = Path(mock_input_dir) / filename
        path.write_text(render_post(title or link.title(), link, published, **kwargs), encoding='utf-8')
        return str(path)
    return _write


@pytest.fixture
def mock_templates_dir(temp_dir):
    """Create a templates directory with a shared layout and one template per purpose."""
    templates_dir = Path(temp_dir) / 'templates'
    templates_dir.mkdir()

    (templates_dir / 'shared.html').write_text("""<!DOCTYPE html>
<html lang="{{ config.lang }}">
<head>
    <title>{{ labels.title }}</title>
    <link rel="canonical" href="{{ canonical }}">
</head>
<body>
{% block content %}{% endblock %}
<footer>{% for badge in badge_list %}<a class="badge" href="{{ badge.url }}">{{ badges[badge.icon] }}</a>{% endfor %}</footer>
</body>
</html>""")

    (templates_dir / 'post.html').write_text("""{% extends layout %}
{% block content %}
<article>
    <h1>{{ post.title }}</h1>
    <time>{{ post.pub_date }}</time>
    <div class="content">{{ content }}</div>
    <ul class="tags">{% for tag in tags %}<li><a href="{{ tag.url }}">{{ tag.name }}</a></li>{% endfor %}</ul>
    {% if post.previous %}<a class="previous" href="{{ post.previous.url }}">{{ post.previous.link }}</a>{% endif %}
    {% if post.next %}<a class="next" href="{{ post.next.url }}">{{ post.next.link }}</a>{% endif %}
    {% for item in post.related %}<a class="related" href="{{ item.url }}">{{ item.link }}</a>{% endfor %}
</article>
{% endblock %}""")

    (templates_dir / 'index.html').write_text("""{% extends layout %}
{% block content %}
<ul>{% for post in posts %}
<li class="post">{{ post.link }}</li>{% endfor %}
</ul>
{% endblock %}""")

    (templates_dir / 'tags.html').write_text("""{% extends layout %}
{% block content %}
<ul>{% for tag, posts in tags %}
<li><a href="{{ tag.url }}">{{ tag.name }}</a> ({{ posts|length }})</li>{% endfor %}
</ul>
{% endblock %}""")

    (templates_dir / 'tag.html').write_text("""{% extends layout %}
{% block content %}
<h1>{{ tag.name }}</h1>
<ul>{% for post in posts %}
<li class="post">{{ post.link }}</li>{% endfor %}
</ul>
{% endblock %}""")

    (templates_dir / 'page.html').write_text("""{% extends layout %}
{% block content %}<h1>{{ page.title }}</h1>{% endblock %}""")

    (templates_dir / 'search.html').write_text("""{% extends layout %}
{% block content %}<form action="{{ config.search.engine }}"></form>{% endblock %}""")

    return str(templates_dir)


@pytest.fixture
def mock_output_dir(temp_dir):
    """Path of a not-yet-created output directory."""
    return str(Path(temp_dir) / 'output')


@pytest.fixture
def site_config(mock_input_dir, mock_templates_dir, mock_output_dir):
    """A validated-looking settings dictionary for a small site."""
    return {
        'input_dir': mock_input_dir,
        'templates_dir': mock_templates_dir,
        'output_dir': mock_output_dir,
        'badges_dir': None,
        'index_template_path': os.path.join(mock_templates_dir, 'index.html'),
        'tags_index_template_path': os.path.join(mock_templates_dir, 'tags.html'),
        'tag_page_template_path': os.path.join(mock_templates_dir, 'tag.html'),
        'author': 'Jane Doe',
        'blog_name': 'Example Blog',
        'description': 'Notes and code',
        'email': 'jane@example.com',
        'language': 'en-us',
        'locale': 'en_US',
        'lang': 'en',
        'back_label': 'Back',
        'css_files': [],
        'js_files': [],
        'pages': [],
        'url': 'https://example.com',
        'base_path': '',
        'badges': [],
        'fediverse_creator': '',
        'rights': 'Copyright Jane Doe',
        'search': {'enabled': False, 'engine': '', 'url': '', 'path': '', 'dir': 'search'},
        'log_dir': None,
    }
