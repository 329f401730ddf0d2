"""
Shared helpers with no database or service dependencies.
"""
