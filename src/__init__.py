"""
Venue Credit Gateway - Revenue-Based Financing Assessments

A FastAPI-based microservice that scores venues from their payment
history, sizes revenue-based credit offers and tracks the offer lifecycle.
"""

__version__ = "0.1.0"
