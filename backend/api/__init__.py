"""
Nuroo B2B API package.

The FastAPI application lives in ``api.app`` (``create_app`` / ``app``).
"""
