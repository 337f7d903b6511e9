"""Rendering surfaces. Views receive snapshots and never touch core state."""
