"""Vector math, coordinate conversion and flight dynamics."""
