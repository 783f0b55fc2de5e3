"""Client-side ntfy notification relay."""
