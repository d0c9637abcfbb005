"""Application layer: use cases orchestrating domain policies and repositories."""
