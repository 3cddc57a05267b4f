"""
secplus-study: offline data pipeline for a Security+ (SY0-701) study app.

Subpackages:
- content/: corpus parsing, extraction rules, generators, merge tool
- cli/: Typer commands wrapping each batch transform
"""

__version__ = "1.0.0"
