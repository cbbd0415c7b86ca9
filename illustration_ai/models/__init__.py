"""Pydantic models for the illustration API."""
