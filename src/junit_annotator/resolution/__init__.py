"""Source file and line recovery."""
