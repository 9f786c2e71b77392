"""Extractors - derive generated-code details from features."""
