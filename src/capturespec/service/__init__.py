"""Service layer: registry-backed template loading and submission."""
