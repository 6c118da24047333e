#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Nesting Core Module
===================
Shared components for the nesting engine and its exporters.
"""

# Exceptions
from core.exceptions import (
    NestingError,
    ConfigurationError,
    ValidationError,
    RequiredFieldError,
    InvalidFieldValueError,
    InvalidPieceError,
    ExportError,
)


__all__ = [
    # Exceptions
    'NestingError',
    'ConfigurationError',
    'ValidationError',
    'RequiredFieldError',
    'InvalidFieldValueError',
    'InvalidPieceError',
    'ExportError',
]
