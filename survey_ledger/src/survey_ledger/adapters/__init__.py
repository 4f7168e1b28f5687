"""Adapters layer - inbound entry points and outbound substrate implementations."""
