# doc_redaction/core/__init__.py

"""Core domain models and utilities used across the redaction system.

This package provides categories, result types, exceptions, and the
pattern loader shared by the engine and the service layer.
"""
