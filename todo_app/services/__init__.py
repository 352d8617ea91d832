"""Task store, recurrence engine and bulk operations."""
