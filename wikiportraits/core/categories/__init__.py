# wikiportraits/core/categories/__init__.py
"""
Commons category rules.

Pure functions over the wizard's form data, except where a Commons or
Wikidata lookup is needed to pick an unambiguous name; those take the
gateway ports as arguments.
"""
