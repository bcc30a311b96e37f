"""
tiny-qreg HTTP listener.

Launch with: tiny-qreg serve
Or programmatically: from tiny_qreg.dashboard import launch; launch()
"""

from tiny_qreg.dashboard.server import create_app, launch

__all__ = ["create_app", "launch"]
