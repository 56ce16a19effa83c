"""Connection handlers."""
