"""Infrastructure Layer — database sessions, SQL repositories, logging setup.

Invariants:
    - Implements the Protocols declared in core/repository_protocols.py
    - Driver errors never leave this layer untyped
"""
