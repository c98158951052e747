"""Infrastructure adapters: logging, cache, database, messaging, auth, observability."""
