"""Somang Church website: public boards and an admin area over a hosted backend."""

__version__ = "0.1.0"
