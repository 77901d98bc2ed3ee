"""Core configuration and shared errors."""
