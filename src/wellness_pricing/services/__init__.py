"""Services built on the pricing engine."""
