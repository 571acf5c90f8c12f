"""
API package containing versioned routes.

A version subpackage exposes a top-level ``router`` that includes all
of its domain-specific endpoints.
"""
