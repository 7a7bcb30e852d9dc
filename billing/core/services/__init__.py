"""
Core pricing and reporting services.

Layer-pure functions that depend only on:
- billing/core/entities/*
- billing/core/money.py
- billing/core/exceptions.py

NO infrastructure imports. Data is fetched by the use cases and passed in.
"""
