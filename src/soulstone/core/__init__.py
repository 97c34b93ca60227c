"""Core primitives shared across layers."""
