"""Terminal rendering helpers for the tikentoken CLI."""
