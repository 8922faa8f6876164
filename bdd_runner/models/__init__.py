"""Tree, metadata and result models."""
