"""Ingestion layer.

Adapters that receive data (push feed, periodic polls) and hand normalized
updates to the state layer.
"""

__all__: list[str] = []
