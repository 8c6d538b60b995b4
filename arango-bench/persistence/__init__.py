"""
Storage for per-request samples and benchmark documents.
"""
