"""Thermal wellness club backend: session cart, route gate and member services."""
