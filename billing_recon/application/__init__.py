"""Application layer: ports, cache and use cases."""
