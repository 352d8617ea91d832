"""Recurring To-Do API: owner-scoped tasks with due dates and recurrence."""
