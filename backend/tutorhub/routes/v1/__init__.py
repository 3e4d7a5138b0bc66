"""Version 1 HTTP routes, mounted under /api/v1."""
