"""Package with a submodule that fails on import."""
