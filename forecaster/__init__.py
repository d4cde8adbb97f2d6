"""Weather forecast aggregation, caching and fallback."""
