"""Leaderboard domain services: score codec, storage and orchestration.

This package contains the domain logic imported by HTTP routes, socket
handlers and CLI commands, keeping transport concerns separated from the
best-score rules.
"""
