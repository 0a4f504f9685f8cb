"""Shared helpers: subprocess execution, logging, error handling and run modes."""
