"""Top-level package for Django configuration.

This package contains the settings modules for the different
environments, the root URL configuration and the entry points for WSGI
and ASGI.
"""
