"""Domain layer: rule model, ownership codec and reconciliation."""
