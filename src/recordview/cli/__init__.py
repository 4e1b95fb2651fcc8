"""CLI layer for recordview."""
