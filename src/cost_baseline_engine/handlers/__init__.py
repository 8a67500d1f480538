"""Lambda handlers for the Cost Baseline Engine."""
