"""
MongoDB-backed document and file storage for request-handling frameworks.
"""
