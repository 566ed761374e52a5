"""Security utilities: password hashing and bearer token sessions."""
