"""Task store engine, sessions and schema setup."""
