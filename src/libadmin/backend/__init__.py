"""Flask JSON API for the library catalog, fronted by the cache."""
