"""Core tokensmith functionality: value parsing, references, catalog, processor, tree walker."""
