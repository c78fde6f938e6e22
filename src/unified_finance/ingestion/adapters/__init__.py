"""Provider adapters. One plugin package per upstream service."""
