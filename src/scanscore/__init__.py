"""ScanScore service: food label analysis and product comparison."""

__version__ = "0.1.0"
