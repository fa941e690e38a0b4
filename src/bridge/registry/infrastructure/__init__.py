"""Store-backed implementations of the registry ports."""
