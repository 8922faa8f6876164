"""Helpers for testing bdd_runner itself."""
