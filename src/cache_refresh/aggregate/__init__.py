"""Cache aggregation helpers.

This package contains routines that convert validated source records into the
three cache payloads (links uploaders, note uploaders by subject, teacher
contribution stats) and persist them as single JSON documents.
"""
