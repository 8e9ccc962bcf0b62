"""HTTP service streaming a live elevator simulation."""
