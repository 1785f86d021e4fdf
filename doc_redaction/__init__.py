# doc_redaction/__init__.py

"""Tracked-change redaction of emails, phone numbers and SSNs in documents."""

__version__ = "0.1.0"
