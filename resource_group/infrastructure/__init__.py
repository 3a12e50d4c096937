"""Infrastructure adapters for host resource types."""
