"""FastAPI web edge: route guard, auth callback and JSON views."""
