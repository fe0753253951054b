"""
Rails Expert marketplace tooling.

Loads, validates and serves the Rails Expert plugin content tree.
"""

__version__ = "0.3.0"
