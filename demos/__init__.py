"""Runnable demos for the meshloc fingerprinting engine."""
