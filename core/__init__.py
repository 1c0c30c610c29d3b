"""Core engine for DepSync."""
