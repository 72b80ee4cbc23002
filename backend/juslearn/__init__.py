"""Application package for the JusLearn learning-management backend.

This package exposes the store, service, repository and model modules
used by the FastAPI application. It is intentionally lightweight;
individual modules contain the concrete implementations and documentation.
"""
