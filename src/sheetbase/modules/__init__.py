"""
Sheetbase Modules.

Feature modules built on the core datastore client:
- tables: generic row/record API over any table
- inventory: typed entity adapters (stock, inward, issue, production orders, vendors)
- registries: derived field-value lists with a durable fallback
"""
