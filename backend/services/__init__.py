"""Business logic for locations."""
