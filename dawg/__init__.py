"""
dawg: a small documentation-site generator.

Reads a directory of markdown chapters, renders each through an HTML
template, and serves the result with live rebuilds or writes static pages.
"""

__version__ = "0.4.0"
