# services/__init__.py
"""
Services module initialization
Contains business logic services for the FastAPI application
"""

from .p12_converter import P12ConverterService, p12_converter_service

__all__ = [
    'P12ConverterService',
    'p12_converter_service'
]
