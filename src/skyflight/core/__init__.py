"""Core infrastructure: logging, configuration and the flight session."""
