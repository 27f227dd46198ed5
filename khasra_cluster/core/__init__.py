"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants, layer order, default strings
- exceptions: Custom exception hierarchy
- ingress: HTTP boundary helpers for the Functions entry point
"""
