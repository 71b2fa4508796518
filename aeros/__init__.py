"""US air-quality choropleth and recommendation toolkit."""

__version__ = "0.1.0"
