"""Reporters: terminal, JSON, SARIF and check-run output."""
