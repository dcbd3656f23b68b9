"""
Core utilities shared across the storefront.

This package hosts configuration, logging setup, password hashing, CSRF
protection and rate limiting. Routers and services depend on these
primitives instead of reading os.environ or cookies directly.
"""
