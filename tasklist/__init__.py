"""Single-list task tracker: validated procedures over a relational task store."""

__version__ = "0.1.0"
