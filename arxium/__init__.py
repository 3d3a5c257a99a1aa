"""arxium: question answering over machine learning research papers."""

__version__ = "1.0.0"
