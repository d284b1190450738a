"""
Command-line interface for Cardflow.
"""
