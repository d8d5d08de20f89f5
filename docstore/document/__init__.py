"""
Document module for managing document operations and database interactions.

This module provides functionality for:
- Record CRUD operations
- GridFS file storage
- Query parameter parsing
- Retrying transient MongoDB failures
"""
