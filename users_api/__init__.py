"""CRUD HTTP service for user records."""
