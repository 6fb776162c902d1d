#!/usr/bin/env python3
"""
Settings loader for Draft static site generator.
Reads the site configuration from a .yml, .yaml or .json file.
"""

import copy
import json
import os
from typing import Any, Dict, List

import yaml

from .errors import ConfigError, LinkNameError
from .validator import validate_link_name


class DraftSettings:
    """Load and validate Draft configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'input_dir': None,
        'templates_dir': None,
        'output_dir': None,
        'badges_dir': None,
        'index_template_path': None,
        'tags_index_template_path': None,
        'tag_page_template_path': None,
        'author': '',
        'blog_name': '',
        'description': '',
        'email': '',
        'language': 'en-us',
        'locale': 'en_US',
        'lang': 'en',
        'back_label': 'Back',
        'css_files': [],
        'js_files': [],
        'pages': [],
        'url': None,
        'base_path': '',
        'badges': [],
        'fediverse_creator': '',
        'rights': '',
        'search': {
            'enabled': False,
            'engine': '',
            'url': '',
            'path': '',
            'dir': 'search',
        },
        'log_dir': None,
    }

    REQUIRED_SETTINGS = ['url', 'input_dir', 'templates_dir', 'output_dir']

    SUPPORTED_EXTENSIONS = ['.yml', '.yaml', '.json']

    def __init__(self, config_path: str):
        """
        Initialize settings loader.

        Args:
            config_path: Path to the configuration file.
        """
        self.config_path = config_path
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)

    def load_settings(self) -> Dict[str, Any]:
        """
        Load, merge and validate settings from the configuration file.

        Returns:
            Dictionary of configuration settings
        """
        loaded_settings = self._load_config_file(self.config_path)

        loaded_search = loaded_settings.pop('search', None) or {}
        if not isinstance(loaded_search, dict):
            raise ConfigError(f"Setting 'search' in {self.config_path} must be a mapping")
        search = dict(self.settings['search'])
        search.update(loaded_search)
        self.settings.update(loaded_settings)
        self.settings['search'] = search

        self._apply_template_defaults()
        self.validate()
        return self.settings

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()
        if file_ext not in self.SUPPORTED_EXTENSIONS:
            raise ConfigError(f"Unsupported config file format: {file_ext or config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext == '.json':
                    loaded = json.load(f)
                else:
                    loaded = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigError(f"Configuration file not found: {config_path}")
        except PermissionError:
            raise ConfigError(f"Permission denied reading configuration file: {config_path}")
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in configuration file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {config_path}: {e}")
        except (IOError, OSError) as e:
            raise ConfigError(f"Error reading configuration file {config_path}: {e}")

        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Configuration file {config_path} must contain a mapping of settings")
        return loaded

    def _apply_template_defaults(self):
        templates_dir = self.settings.get('templates_dir')
        if not templates_dir:
            return
        defaults = {
            'index_template_path': 'index.html',
            'tags_index_template_path': 'tags.html',
            'tag_page_template_path': 'tag.html',
        }
        for key, filename in defaults.items():
            if not self.settings.get(key):
                self.settings[key] = os.path.join(templates_dir, filename)

    def validate(self) -> None:
        """
        Check the merged settings, reporting every problem at once.

        Raises:
            ConfigError: listing all problems found
        """
        problems: List[str] = []

        for key in self.REQUIRED_SETTINGS:
            if not self.settings.get(key):
                problems.append(f"missing a required setting: {key}")

        for key in ('pages', 'badges', 'css_files', 'js_files'):
            if not isinstance(self.settings.get(key) or [], list):
                problems.append(f"setting '{key}' must be a list")

        if isinstance(self.settings.get('pages') or [], list):
            for index, page in enumerate(self.settings.get('pages') or []):
                problems.extend(self._check_page(index, page))

        if isinstance(self.settings.get('badges') or [], list):
            for index, badge in enumerate(self.settings.get('badges') or []):
                if not isinstance(badge, dict) or not badge.get('title'):
                    problems.append(f"badge #{index + 1} must have a title")

        search = self.settings['search']
        if search.get('enabled') and not search.get('path'):
            problems.append("search is enabled but search.path is not set")
        if search.get('enabled'):
            try:
                validate_link_name(str(search.get('dir') or ''))
            except LinkNameError as e:
                problems.append(f"search.dir: {e}")

        if problems:
            raise ConfigError(
                "Configuration {} has the following issues:\n{}".format(self.config_path, "\n".join(problems))
            )

    def _check_page(self, index, page):
        if not isinstance(page, dict):
            return [f"page #{index + 1} must be a mapping with template, title and link"]
        problems = []
        for field in ('template', 'title', 'link'):
            if not page.get(field):
                problems.append(f"page #{index + 1} is missing '{field}'")
        if page.get('link'):
            try:
                validate_link_name(str(page['link']))
            except LinkNameError as e:
                problems.append(f"page #{index + 1} link {page['link']!r}: {e}")
        return problems
