"""
Resource tree package.
"""
