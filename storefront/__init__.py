"""Session-authenticated storefront backed by flat JSON files."""
