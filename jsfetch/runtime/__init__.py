"""Response model and domain errors."""
