"""
Reads source documents and splits them into front matter and body.

Two framings are accepted:

    ---                         title: Hello
    title: Hello                link: hello
    link: hello                 ==cut here==
    ---
                                Body text...
    Body text...

The first is YAML front matter; the second is an informal header map where
each line is "key: value".
"""

import logging
import os
from typing import List

import yaml

from .errors import FrontMatterError, SourceError
from .models import FrontMatter

YAML_DELIMITER = '---'
CUT_MARKER = '==cut here=='

YAML_FRAMING = 'yaml'
HEADER_FRAMING = 'headers'

logger = logging.getLogger('Draft.loader')


class SourceFile:
    """A source document split into parsed headers and raw body."""

    def __init__(self, path, front_matter, body, framing, unknown_headers=None):
        self.path = path
        self.front_matter = front_matter
        self.body = body
        self.framing = framing
        self.unknown_headers = list(unknown_headers or [])

    def __repr__(self):
        return f"SourceFile({self.path!r})"


def list_sources(input_dir) -> List[str]:
    """Return every non-directory entry of input_dir, sorted by file name."""
    try:
        names = sorted(os.listdir(input_dir))
    except (IOError, OSError) as e:
        raise SourceError(f"Failed to read directory '{input_dir}': {e}")
    return [os.path.join(input_dir, name) for name in names
            if not os.path.isdir(os.path.join(input_dir, name))]


def _trim_body(lines):
    if lines and not lines[0].strip():
        lines = lines[1:]
    return '\n'.join(lines)


def parse_header_map(header_lines, path):
    """Parse 'key: value' lines into a mapping."""
    headers = {}
    for number, line in enumerate(header_lines, start=1):
        if not line.strip():
            continue
        if ':' not in line:
            raise FrontMatterError(f"Malformed header on line {number} of '{path}': {line!r}")
        key, value = line.split(':', 1)
        headers[key.strip()] = value.strip()
    return headers


def split_front_matter(text, path='<string>'):
    """
    Split a document into its metadata mapping and body.

    Returns:
        Tuple of (mapping, body, framing)
    """
    lines = text.splitlines()

    if lines and lines[0].rstrip() == YAML_DELIMITER:
        try:
            end = next(i for i in range(1, len(lines)) if lines[i].rstrip() == YAML_DELIMITER)
        except StopIteration:
            raise FrontMatterError(f"Unclosed front matter block in '{path}': missing closing '---'")
        block = '\n'.join(lines[1:end])
        try:
            mapping = yaml.safe_load(block)
        except yaml.YAMLError as e:
            raise FrontMatterError(f"Invalid YAML front matter in '{path}': {e}")
        if mapping is None:
            mapping = {}
        if not isinstance(mapping, dict):
            raise FrontMatterError(f"Front matter in '{path}' must be a mapping of headers")
        return mapping, _trim_body(lines[end + 1:]), YAML_FRAMING

    if CUT_MARKER in (line.rstrip() for line in lines):
        cut = next(i for i, line in enumerate(lines) if line.rstrip() == CUT_MARKER)
        mapping = parse_header_map(lines[:cut], path)
        return mapping, _trim_body(lines[cut + 1:]), HEADER_FRAMING

    raise FrontMatterError(f"No front matter found in '{path}': expected a '---' block or a '{CUT_MARKER}' line")


def load_source(path) -> SourceFile:
    """Read and split a single source document."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except (IOError, OSError, UnicodeDecodeError) as e:
        raise SourceError(f"Failed to read file '{path}': {e}")

    mapping, body, framing = split_front_matter(text, path)
    try:
        front_matter, unknown = FrontMatter.from_mapping(mapping)
    except FrontMatterError as e:
        raise FrontMatterError(f"Failed to process file '{path}': {e}")

    if framing == YAML_FRAMING:
        if unknown:
            logger.debug(f"Ignoring unknown headers in {path}: {', '.join(unknown)}")
        unknown = []

    return SourceFile(path, front_matter, body, framing, unknown)


def load_sources(input_dir) -> List[SourceFile]:
    """Load every source document of input_dir in enumeration order."""
    return [load_source(path) for path in list_sources(input_dir)]
