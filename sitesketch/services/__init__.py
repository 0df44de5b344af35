"""AI generation and stream relay services."""
