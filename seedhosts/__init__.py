"""Seed host resolution for cluster discovery."""
