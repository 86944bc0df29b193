"""
Role registry package.
"""
