"""
dbspine - Multi-engine database browsing and editing.

- dbspine.core: adapters, dialects, pending changes, errors
- dbspine.cli: ``dbspine`` command-line interface
"""

__version__ = "0.1.0"
