"""REST API for volleyball lineups."""
