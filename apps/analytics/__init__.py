"""Admin dashboard analytics."""
