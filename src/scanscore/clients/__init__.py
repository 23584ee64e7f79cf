"""Clients for external product data services."""
