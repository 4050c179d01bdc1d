"""Fetch configuration: schema and resolution."""
