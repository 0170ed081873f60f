"""Complaint authenticity classification engine."""
