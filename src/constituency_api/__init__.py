"""Constituency management API."""
