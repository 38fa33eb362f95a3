"""Chat session orchestrator for the ISO document navigator."""
