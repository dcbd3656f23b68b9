"""
High-level use cases for the storefront.

Each service orchestrates a FileRepository to implement business rules
(authenticate, search products, check out, build reports). Routers call
these services instead of touching the JSON files or sessions directly.
"""
