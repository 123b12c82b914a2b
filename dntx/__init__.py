"""
dntx — temporarily install and run a .NET tool.
"""

__version__ = "0.1.0"
