"""Pydantic schemas for the JSON endpoints."""
