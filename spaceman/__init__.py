"""Spaceman - interactive workspace manager for JavaScript monorepos."""
