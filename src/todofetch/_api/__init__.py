"""Todoist endpoint modules (internal)."""
