"""HTTP API for the pricing calculator."""
