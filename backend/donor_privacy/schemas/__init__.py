"""Schemas — Pydantic response models at the API boundary."""
