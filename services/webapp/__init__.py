"""
FastAPI reporting service exposing the ticker cache.
"""
