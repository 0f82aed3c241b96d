"""
HTTP API for the Content Ranking Engine.
"""
