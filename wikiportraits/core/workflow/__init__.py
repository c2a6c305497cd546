# wikiportraits/core/workflow/__init__.py
"""Step graph and state machine of the upload wizard."""
