"""Nail Studio remote service layer.

This package wraps the nail design webhook that performs generation,
storage and deletion.

Modules
-------
client
    ``NailDesignClient`` and the ``ServiceError`` exception family.
models
    Pydantic models for request bodies and responses.
"""
