# doc_redaction/engine/__init__.py

"""Engine package: pattern catalog, document interface and redaction engine.

The engine talks to the document only through a DocumentSession; the
in-memory driver is the reference host used by the UI and the tests.
"""
