"""
Dealerhub
Multi-tenant dealer marketplace backend.
"""

__version__ = "0.1.0"
