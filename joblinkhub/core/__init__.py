"""Core utilities: security, errors, logging, rate limiting."""
