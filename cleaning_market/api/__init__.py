# cleaning_market/api/__init__.py
"""
HTTP API (FastAPI).
"""
