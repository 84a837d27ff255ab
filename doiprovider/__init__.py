"""Mint, register, resolve and retire DOIs for repository items through EZID."""
