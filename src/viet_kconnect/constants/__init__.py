"""Static lookup tables shared across the API."""
