"""Command line scripts for volleyball lineups."""
