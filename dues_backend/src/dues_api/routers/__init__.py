"""HTTP routers for the dues backend."""
