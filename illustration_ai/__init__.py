"""Illustration parsing service."""
