"""Infrastructure adapters for storage, exchange rates and logging."""
