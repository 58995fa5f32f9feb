"""Schemas — Pydantic models for persisted records and API request bodies."""
