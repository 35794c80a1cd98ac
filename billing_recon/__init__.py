"""Financial linking and reconciliation engine."""
