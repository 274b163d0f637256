"""AskDoc: document Q&A service with an embeddable chat widget."""

__version__ = "0.1.0"
