"""Configuration, constants, error types and trust-boundary checks."""
