"""
Sheetbase Tables Module

Generic access to any table:
- Header inspection
- Full-table reads with client-side paging
- Positional and keyed mutations
- Table initialization and clearing
"""

from .router import router

__all__ = ["router"]
