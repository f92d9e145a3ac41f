"""Encoding helpers, error kinds, settings and the JWK model."""
