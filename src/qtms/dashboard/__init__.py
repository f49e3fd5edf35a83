"""
qtms REST API.

Launch with: qtms serve
Or programmatically: from qtms.dashboard import launch; launch()
"""

from qtms.dashboard.server import create_app, launch

__all__ = ["create_app", "launch"]
