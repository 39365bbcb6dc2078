"""FastAPI surface for the triage layer."""
