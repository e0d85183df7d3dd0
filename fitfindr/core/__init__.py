"""Core configuration, logging, database and geocoding."""
