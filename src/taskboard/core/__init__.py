"""Ports, errors, session models and the session controller."""
