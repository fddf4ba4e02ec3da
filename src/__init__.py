"""pagecraft: bilingual content documents for the marketing-site admin."""

__version__ = "0.4.0"
