"""Access layer: transport, rate limiting, caching, auth and the request pipeline."""
