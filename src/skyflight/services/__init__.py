"""Derived flight services."""
