"""Departure readiness engine for transit riders."""
