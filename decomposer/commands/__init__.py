"""Click command groups for the decomposer CLI."""
