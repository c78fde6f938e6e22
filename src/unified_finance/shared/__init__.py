"""Cross-cutting types: exceptions, domain models, validation and TTL policy."""
