"""
Shared utility functions.

Logging setup and structured event helpers live in ``utils.logging``.
"""
