"""Segment kernel: probing, version lookup, constraint checks and formatting."""
