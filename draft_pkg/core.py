"""Build orchestration and console logging for Draft."""

import logging
import os
import time
from datetime import datetime

from . import __version__
from .graph import ContentGraphBuilder
from .links import SiteLinks
from .loader import load_sources
from .markup import MarkdownProcessor
from .publisher import Publisher, load_badges


class InfoFilter(logging.Filter):
    """Filter to allow only progress INFO messages (and anything louder) on the console."""
    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        allowed_messages = [
            "Draft version",
            "Site build completed in",
            "Total posts generated:",
            "Total pages generated:",
            "Total tags generated:",
            "Post:",
            "Page:",
            "Index:",
            "Tag Index:",
            "Tag:",
            "RSS:",
            "Atom:",
            "Sitemap:",
            "Search export:",
            "Search page:",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


class Draft:
    """Builds a complete site from a validated settings dictionary."""

    def __init__(self, config):
        self.config = config
        self.input_dir = config['input_dir']
        self.templates_dir = config['templates_dir']
        self.output_dir = os.path.expanduser(config['output_dir'])
        self.config['output_dir'] = self.output_dir
        self.links = SiteLinks.from_config(config)
        self.markdown = MarkdownProcessor()

        self.posts_generated = 0
        self.pages_generated = 0
        self.tags_generated = 0
        self.private_skipped = 0
        self.graph = None

        self.setup_logging()

    def setup_logging(self):
        """Set up logging configuration."""
        self.logger = logging.getLogger('Draft')
        self.logger.setLevel(logging.DEBUG)

        if not self.logger.handlers:
            # Console handler with filter
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.INFO)
            console_handler.addFilter(InfoFilter())
            console_formatter = logging.Formatter('%(message)s')
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

            # File handler for all logs
            log_dir = self.config.get('log_dir')
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
                log_filename = datetime.now().strftime('draft_%Y-%m-%d_%H-%M-%S.log')
                file_handler = logging.FileHandler(os.path.join(log_dir, log_filename))
                file_handler.setLevel(logging.DEBUG)
                file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
                file_handler.setFormatter(file_formatter)
                self.logger.addHandler(file_handler)

    def build_graph(self):
        """Load, validate and cross-reference every source document."""
        builder = ContentGraphBuilder(self.config, self.markdown)
        builder.add_sources(load_sources(self.input_dir))
        builder.add_pages(self.config.get('pages') or [])
        self.graph = builder.build()
        self.private_skipped = self.graph.private_count
        return self.graph

    def build(self):
        """Main build process."""
        start_time = time.time()
        self.logger.info(f"Draft version {__version__}")

        badges = load_badges(self.config.get('badges_dir'))
        graph = self.build_graph()

        publisher = Publisher(self.config, graph, self.links, badges=badges, version=__version__)
        publisher.publish()

        self.posts_generated = publisher.posts_generated
        self.pages_generated = publisher.pages_generated
        self.tags_generated = publisher.tags_generated

        total_time = time.time() - start_time
        self.logger.info(f"Site build completed in {total_time:.6f} seconds.")
        self.logger.info(f"Total posts generated: {self.posts_generated}")
        self.logger.info(f"Total pages generated: {self.pages_generated}")
        self.logger.info(f"Total tags generated: {self.tags_generated}")
        return graph
