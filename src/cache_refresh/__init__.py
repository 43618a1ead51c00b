"""cache_refresh package.

Contains modules for fetching note, form and YouTube submission documents from
an Appwrite database, validating them, building the uploader and teacher
statistics caches, and writing those caches back as JSON documents.

Architecture:
- Source collections → validated records → cache payloads stored in Appwrite
- The three cache tasks run concurrently with asyncio
- Pydantic models validate source records and teacher statistics
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
