"""
Front matter validation and the link-safety policy.

Header problems are collected and reported together so that an author can fix
every issue in a document in one pass.
"""

import re
from typing import Iterable, List

from .errors import LinkNameError, ValidationError
from .models import FrontMatter, VALID_STATUSES

REQUIRED_HEADERS = ('title', 'link', 'published', 'template', 'description')

MAX_LINK_LENGTH = 255

ILLEGAL_LINK_CHARS = re.compile(r'[<>:"/\\|?*\n\r\t]')


def check_headers(front_matter: FrontMatter, unknown_headers: Iterable[str] = ()) -> List[str]:
    """
    Check required headers, the status value and unrecognised headers.

    Returns:
        List of problem lines, empty when the headers are valid
    """
    problems = []
    for header in REQUIRED_HEADERS:
        if not getattr(front_matter, header):
            problems.append(f"missing a required header: {header}")

    if front_matter.status not in VALID_STATUSES:
        problems.append(f"Invalid value for status: {front_matter.status}")

    for header in unknown_headers:
        problems.append(f"contains unknown header: {header}")

    return problems


def validate_link_name(link: str) -> None:
    """
    Reject links that are unsafe to use as a directory name or URL segment.

    Raises:
        LinkNameError: describing the first rule the link breaks
    """
    if link in ('.', '..'):
        raise LinkNameError("invalid name: '.' and '..' are not allowed")

    if '..' in link:
        raise LinkNameError("invalid name: path traversal patterns like '..' are not allowed")

    if ILLEGAL_LINK_CHARS.search(link):
        raise LinkNameError('invalid name: contains illegal characters (e.g., < > : " / \\ | ? *)')

    if link.strip() != link:
        raise LinkNameError("invalid name: leading or trailing whitespace is not allowed")

    if not link or len(link) > MAX_LINK_LENGTH:
        raise LinkNameError(f"invalid name: must be between 1 and {MAX_LINK_LENGTH} characters long")


def validate_front_matter(front_matter: FrontMatter, path: str,
                          unknown_headers: Iterable[str] = (),
                          tag_names: Iterable[str] = ()) -> None:
    """
    Run header validation and the link-safety policy on a document.

    Raises:
        ValidationError: listing every problem found
    """
    problems = check_headers(front_matter, unknown_headers)

    if front_matter.link:
        try:
            validate_link_name(front_matter.link)
        except LinkNameError as e:
            problems.append(f"link {front_matter.link!r}: {e}")

    # Tags become directories under tags/, so they follow the same policy.
    for name in tag_names:
        try:
            validate_link_name(name)
        except LinkNameError as e:
            problems.append(f"tag {name!r}: {e}")

    if problems:
        raise ValidationError(path, problems)
