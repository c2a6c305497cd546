# wikiportraits/core/wikitext/__init__.py
"""Wikitext, filenames and captions for Commons file pages."""
