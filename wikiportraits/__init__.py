# wikiportraits/__init__.py
"""
WikiPortraits Uploader Service.

Backend for the WikiPortraits upload wizard: a thin layer over the Wikimedia
Commons, Wikidata and Wikipedia APIs plus the category, wikitext and workflow
rules that turn a photographer's form into Commons pages.

The package follows Hexagonal Architecture (Ports & Adapters).
"""

__version__ = "1.0.0"
