"""Core configuration, security and shared infrastructure."""
