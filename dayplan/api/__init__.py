"""HTTP API for the day planner."""
