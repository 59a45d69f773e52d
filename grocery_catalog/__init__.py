"""
Grocery Catalog Table

Modules:
    models     - Data models (ProductRow, NetWeight, RawProductRecord)
    common     - Shared utilities (constants, money, config loader, logging, CSV)
    catalog    - Catalog document classification and normalization
    sources    - HTTP and local catalog document sources
    pipeline   - Reactive category/supermarket filter pipeline
    rendering  - Sortable, paginated product table view
"""
