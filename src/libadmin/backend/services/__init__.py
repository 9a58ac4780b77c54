"""Resource services: read-through caching over the SQLite system of record."""
