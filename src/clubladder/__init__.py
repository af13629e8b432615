"""Club ladder ratings and match scheduling."""
