"""Roster management, team formation and position heuristics."""
