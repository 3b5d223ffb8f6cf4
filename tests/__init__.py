"""Test suite for daily-planner."""
