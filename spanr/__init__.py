"""
spanr: set operations on chromosome ranges stored as run lists
"""
__version__ = '0.2.0'
