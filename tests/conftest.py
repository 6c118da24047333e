"""Shared fixtures for nesting tests."""

import pytest

from nesting.models import StockSheet


@pytest.fixture
def board():
    """Standard 2440 x 1220 board, 20 mm margin and spacing"""
    return StockSheet(sheet_width=2440, sheet_height=1220, margin=20, spacing=20)


@pytest.fixture
def bare_board():
    """Small board without margin or spacing"""
    return StockSheet(sheet_width=1000, sheet_height=500, margin=0, spacing=0)
