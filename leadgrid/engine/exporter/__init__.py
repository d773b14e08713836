"""Exporter SPI and implementations."""

from .base import BaseExporter
from .csv_encoder import CsvEncoder, column_label
from .file_exporter import FileExporter, export_leads

__all__ = ["BaseExporter", "CsvEncoder", "FileExporter", "column_label", "export_leads"]
