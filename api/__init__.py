"""
Bloggazers API package.

Provides the FastAPI application for the Bloggazers blogging platform.
The application lives in api.app; module routers import api.dependencies,
so this package stays import-light.
"""
