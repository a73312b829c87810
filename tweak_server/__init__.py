"""
Local HTTP front-end for tweak sessions
"""
