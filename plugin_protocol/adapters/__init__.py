"""Payload decoding and protocol version adapters."""
