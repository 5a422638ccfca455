"""
API package containing the HTTP routers.
"""
