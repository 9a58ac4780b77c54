"""Flask blueprints, one per resource plus cache monitoring."""
