"""Orchestr8 dashboard API."""
