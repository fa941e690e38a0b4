"""Shared infrastructure: settings, logging, database access, observability."""
