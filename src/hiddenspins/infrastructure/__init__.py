"""Infrastructure layer: store adapters, external clients, observability."""
