"""Adapters implementing the core ports: SQLite storage, CSV directory,
call control and permission checks."""
