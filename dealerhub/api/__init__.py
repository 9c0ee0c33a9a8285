"""
API Package
FastAPI application, routers, schemas and request dependencies.
"""
