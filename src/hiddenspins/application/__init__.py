"""Application layer - use cases on top of the domain ports."""
