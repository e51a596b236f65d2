"""Core utilities shared across the application."""
