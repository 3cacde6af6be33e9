"""Core entities and collaborator interfaces."""
