"""
Negobi inventory and field-visit client
Business rules over the Negobi REST backend plus a small operations API
"""

__version__ = "1.0.0"
