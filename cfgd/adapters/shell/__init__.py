"""Shell adapters — external commands and filesystem artifacts."""
