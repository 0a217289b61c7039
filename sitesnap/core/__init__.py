"""Core configuration, logging, errors and URL helpers for sitesnap."""
