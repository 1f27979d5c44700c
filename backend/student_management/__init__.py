"""Application package for the Student Management backend.

This package exposes the domain, merge, projection, repository and
service modules used by the FastAPI application. It is intentionally
lightweight; individual modules contain the concrete implementations
and documentation.
"""
