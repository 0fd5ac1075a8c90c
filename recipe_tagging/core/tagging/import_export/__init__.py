"""
Import and export of master tag lists.
"""
