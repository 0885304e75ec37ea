"""Viet K-Connect community API."""
