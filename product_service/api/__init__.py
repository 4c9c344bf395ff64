"""
HTTP API package
"""
