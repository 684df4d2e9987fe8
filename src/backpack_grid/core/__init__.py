"""Core data model, occupancy resolution and placement validation."""
