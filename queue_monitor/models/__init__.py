"""Source record and snapshot models."""
