"""Validation utilities for raw Appwrite documents.

Converts raw document dictionaries into typed source records and drops the
ones that fail validation.
"""
