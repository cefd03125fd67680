"""
OrderDesk Modules
=================

Flask blueprint modules mounted by the OrderDesk extension.
"""

__all__ = ['orders']
