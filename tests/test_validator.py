"""Tests for header validation and the link-safety policy."""

import pytest

from draft_pkg.errors import LinkNameError, ValidationError
from draft_pkg.models import FrontMatter
from draft_pkg.validator import (
    MAX_LINK_LENGTH, check_headers, validate_front_matter, validate_link_name,
)


def complete_front_matter(**overrides):
    fields = {
        'title': 'Test Title',
        'link': 'test-link',
        'published': '2024-11-29T18:29:00-08:00',
        'template': 'post.html',
        'description': 'Test description',
        'status': 'public',
    }
    fields.update(overrides)
    return FrontMatter(**fields)


class TestValidateLinkName:
    """Test the link-safety policy."""

    @pytest.mark.parametrize('link', ['valid-link', 'good_name_123', 'about', 'a' * MAX_LINK_LENGTH])
    def test_valid_links(self, link):
        """Test that ordinary slugs are accepted."""
        validate_link_name(link)

    @pytest.mark.parametrize('link, message', [
        ('.', "invalid name: '.' and '..' are not allowed"),
        ('..', "invalid name: '.' and '..' are not allowed"),
        ('abc/../def', "invalid name: path traversal patterns like '..' are not allowed"),
        ('invalid<link>', 'invalid name: contains illegal characters (e.g., < > : " / \\ | ? *)'),
        ('nested/link', 'invalid name: contains illegal characters (e.g., < > : " / \\ | ? *)'),
        ('line\nbreak', 'invalid name: contains illegal characters (e.g., < > : " / \\ | ? *)'),
        (' leading', 'invalid name: leading or trailing whitespace is not allowed'),
        ('trailing ', 'invalid name: leading or trailing whitespace is not allowed'),
        ('', 'invalid name: must be between 1 and 255 characters long'),
        ('a' * 301, 'invalid name: must be between 1 and 255 characters long'),
    ])
    def test_invalid_links(self, link, message):
        """Test that unsafe slugs are rejected with the rule they break."""
        with pytest.raises(LinkNameError) as exc_info:
            validate_link_name(link)
        assert str(exc_info.value) == message


class TestCheckHeaders:
    """Test required header and status checks."""

    def test_complete_headers(self):
        """Test that a complete public document has no problems."""
        assert check_headers(complete_front_matter()) == []

    def test_private_status_is_valid(self):
        """Test that private is an accepted status."""
        assert check_headers(complete_front_matter(status='private')) == []

    def test_missing_headers_and_bad_status(self):
        """Test that every missing header and the status are reported together."""
        front_matter = FrontMatter(title='Incomplete Post', status='draft')

        problems = check_headers(front_matter)

        assert problems == [
            'missing a required header: link',
            'missing a required header: published',
            'missing a required header: template',
            'missing a required header: description',
            'Invalid value for status: draft',
        ]

    def test_empty_status_is_invalid(self):
        """Test that a document without a status is rejected."""
        problems = check_headers(complete_front_matter(status=''))
        assert problems == ['Invalid value for status: ']

    def test_unknown_headers_reported(self):
        """Test that unrecognised headers are listed."""
        problems = check_headers(complete_front_matter(), unknown_headers=['subtitle'])
        assert problems == ['contains unknown header: subtitle']


class TestValidateFrontMatter:
    """Test aggregated validation of a whole document."""

    def test_valid_document(self):
        """Test that a valid document passes silently."""
        validate_front_matter(complete_front_matter(), 'posts/test.md', tag_names=['meta', 'code'])

    def test_error_message_lists_all_problems(self):
        """Test the report format for a document with several problems."""
        front_matter = FrontMatter(title='Incomplete Post', status='draft')

        with pytest.raises(ValidationError) as exc_info:
            validate_front_matter(front_matter, 'posts/incomplete.md')

        assert str(exc_info.value) == (
            "Post posts/incomplete.md has the following issues:\n"
            "missing a required header: link\n"
            "missing a required header: published\n"
            "missing a required header: template\n"
            "missing a required header: description\n"
            "Invalid value for status: draft"
        )
        assert exc_info.value.path == 'posts/incomplete.md'
        assert len(exc_info.value.problems) == 5

    def test_unsafe_link_reported(self):
        """Test that an unsafe link is reported with the header problems."""
        with pytest.raises(ValidationError) as exc_info:
            validate_front_matter(complete_front_matter(link='../etc'), 'posts/bad.md')

        assert exc_info.value.problems == [
            "link '../etc': invalid name: path traversal patterns like '..' are not allowed",
        ]

    def test_unsafe_tag_reported(self):
        """Test that tag names follow the link-safety policy."""
        with pytest.raises(ValidationError) as exc_info:
            validate_front_matter(complete_front_matter(), 'posts/bad.md', tag_names=['c/c++'])

        assert exc_info.value.problems[0].startswith("tag 'c/c++': invalid name: contains illegal characters")
