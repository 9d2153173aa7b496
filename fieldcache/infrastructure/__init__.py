"""
Infrastructure Module

Client-side adapters for the remote cache backends and the per-worker local cache.
"""
