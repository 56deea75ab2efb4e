"""Assign written-interview graders in Greenhouse."""
