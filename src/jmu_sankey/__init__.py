"""Sankey flow diagrams of the JMU budget."""

__version__ = "0.1.0"
