"""Behavior-driven test suites: tree model, execution engine and assertions."""
