"""
Exceptions raised by Draft.

Every stage raises one of these and lets it propagate; only the command-line
entry point catches them, prints the message and exits non-zero.
"""


class DraftError(Exception):
    """Base exception for all Draft errors."""


class ConfigError(DraftError):
    """Missing, unreadable or malformed site configuration."""


class SourceError(DraftError):
    """A source directory or document could not be read."""


class FrontMatterError(DraftError):
    """A document's metadata block could not be parsed."""


class ValidationError(DraftError):
    """One or more problems found in a document's metadata."""

    def __init__(self, path, problems):
        self.path = path
        self.problems = list(problems)
        super().__init__(
            "Post {} has the following issues:\n{}".format(path, "\n".join(self.problems))
        )


class LinkNameError(DraftError):
    """A link (slug) violates the link-safety policy."""


class DuplicateLinkError(DraftError):
    """Two documents or pages claim the same link."""


class PublishError(DraftError):
    """An output artifact could not be rendered or written."""


class TemplateMissingError(PublishError):
    """A template file the build needs does not exist."""
