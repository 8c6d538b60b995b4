"""
Statistics reporters.
"""
