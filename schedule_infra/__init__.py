"""Persistence, logging and wiring for the scheduling core."""
