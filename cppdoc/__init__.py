"""
cppdoc - C++ reference documentation builder
"""

__version__ = '0.1.0'
