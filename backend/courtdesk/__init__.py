"""
Courtdesk: court case and hearing management API
"""

__version__ = "1.0.0"
