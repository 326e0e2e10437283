"""
dtgen: data tier generator.

Reads a SQL Server schema description and generates CRUD stored
procedures together with transfer and access types in a host language.
"""

__version__ = "0.1.0"
