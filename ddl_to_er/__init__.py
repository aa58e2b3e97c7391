"""
ddl-to-er: SQL migrations to Mermaid ER diagrams
"""
from .src import generate_er_diagram

__version__ = '0.1.0'

__all__ = ['generate_er_diagram', '__version__']
