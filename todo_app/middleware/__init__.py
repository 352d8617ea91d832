"""Request-level plumbing: authentication and CORS."""
