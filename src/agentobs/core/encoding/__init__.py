"""Encoders for exporting records and analytics."""
