"""Venue planner service package."""
