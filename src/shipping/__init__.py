"""Cargo booking, routing and delivery tracking."""
