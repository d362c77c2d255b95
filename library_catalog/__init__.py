"""Library Catalog - core application package

This package contains:
- Catalog business rules (library_service.py)
- Collaborator contracts (interfaces.py)
- Data model (book.py)
- SQLite persistence, membership and notification adapters
- CLI (main.py) and HTTP API (api.py)
"""

__version__ = "1.0.0"
