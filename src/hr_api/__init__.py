"""HR Access API - role-scoped employee and department management."""

__version__ = "0.1.0"
