"""
basecore - shared runtime for services.

Settings, logging setup and Redis access. No domain code lives here.
"""
