"""
Exchange client adapters.
"""
