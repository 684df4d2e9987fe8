"""Packing algorithms."""
