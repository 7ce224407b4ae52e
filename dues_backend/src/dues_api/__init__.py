"""
Dues backend package.

The data-access core lives in repositories, validation, models and db; main
exposes it over a FastAPI application.
"""
