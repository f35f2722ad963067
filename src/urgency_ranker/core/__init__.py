"""Ports, shared state and error types used across the package."""
