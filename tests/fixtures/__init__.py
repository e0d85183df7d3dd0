"""Test fixture package for FitFindr.

Contains fixtures for:
- Database sessions (in-memory SQLite)
- Geocoding without network access
- API clients with overridden dependencies
"""
