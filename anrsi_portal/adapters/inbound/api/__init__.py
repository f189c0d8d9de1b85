"""FastAPI service for public page views and admin editing sessions."""
