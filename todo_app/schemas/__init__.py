"""Request and response schemas for the To-Do API."""
