"""Meeting Document Search

Sorted, deduplicated results from a public meeting-document search index.
"""

__version__ = "0.1.0"
