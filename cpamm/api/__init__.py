"""HTTP dispatch surface for the pool engine."""
