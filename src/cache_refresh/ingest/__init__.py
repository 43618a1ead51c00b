"""Fetching helpers for the source collections.

Reads every document of a collection with cursor pagination so the cache
tasks always aggregate over a full scan.
"""
