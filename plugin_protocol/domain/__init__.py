"""Payload model, value decoding and event building."""
