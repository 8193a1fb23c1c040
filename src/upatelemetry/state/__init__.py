"""State layer.

The single source of truth for how push-feed updates and polled side-panel
data are merged into the dashboard view.
"""
