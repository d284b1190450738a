"""
Data layer for Cardflow.
"""
