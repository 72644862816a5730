"""Portfolio enhancer: turns an equity-plan portfolio export into a workbook of live formulas."""

__version__ = "1.0.0"
