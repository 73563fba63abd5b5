"""tuido: a terminal todo list organised in contexts."""

__version__ = "0.2.0"
