"""
Service layer for the BTC Markets adapter.
"""
