"""Enumerations and pydantic schemas shared by services and API."""
