"""ORM Models — one module per table; mapped to core/identity.py at the repository boundary."""
