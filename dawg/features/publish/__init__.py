"""Convert-mode publishing."""
from .writer import is_file_destination, rewrite_links, write_snapshot

__all__ = ["write_snapshot", "rewrite_links", "is_file_destination"]
