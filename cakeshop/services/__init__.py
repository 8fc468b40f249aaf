"""Shared services: money helpers."""
