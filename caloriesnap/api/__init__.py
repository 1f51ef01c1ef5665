"""REST API endpoints."""
