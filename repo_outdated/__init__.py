"""repo-outdated: audit GitHub repositories for outdated Composer dependencies."""

__version__ = "0.1.0"
