"""graphtoll — metered weighted-graph routing with moderated weight updates."""

__version__ = "0.1.0"
