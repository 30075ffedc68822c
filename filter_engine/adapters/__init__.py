"""Persistence adapters: in-memory and MongoDB."""
