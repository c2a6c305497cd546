# wikiportraits/core/__init__.py
"""
Core Domain Layer.

Pure business logic of the uploader: category naming rules, wikitext
generation, workflow state and the use cases that drive the Wikimedia
gateways. Nothing here imports FastAPI or httpx; infrastructure is reached
through the interfaces in `core.ports`.
"""
