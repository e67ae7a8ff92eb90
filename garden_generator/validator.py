"""Validation of garden dimensions and finished grids."""

from typing import Tuple

import numpy as np

from .constants import EMPTY, MIN_DIMENSION, VALID_SYMBOLS


class InvalidDimensionsError(Exception):
    """Raised when the requested garden size cannot host the zone layout."""
    pass


def validate_dimension(name: str, value) -> Tuple[bool, str]:
    """Validate a single garden dimension."""
    if not isinstance(value, (int, np.integer)) or isinstance(value, bool):
        return False, f"{name} must be an integer, got {type(value).__name__}"
    if value <= 0:
        return False, f"{name} must be positive, got {value}"
    if value < MIN_DIMENSION:
        return False, f"{name} must be at least {MIN_DIMENSION}, got {value}"
    return True, ""


def validate_dimensions(width, height) -> None:
    """
    Validate garden dimensions.

    Raises:
        InvalidDimensionsError: If either dimension is not an integer >= MIN_DIMENSION
    """
    for name, value in (("width", width), ("height", height)):
        is_valid, error = validate_dimension(name, value)
        if not is_valid:
            raise InvalidDimensionsError(error)


def validate_garden(grid: np.ndarray) -> Tuple[bool, str]:
    """
    Validate a finished garden grid.

    Returns:
        (is_valid, error_message)
    """
    if grid.ndim != 2:
        return False, f"Garden must be 2-D, got {grid.ndim} dimensions"

    empty_cells = int(np.count_nonzero(grid == EMPTY))
    if empty_cells:
        return False, f"{empty_cells} cells were left empty"

    unknown = set(np.unique(grid).tolist()) - VALID_SYMBOLS
    if unknown:
        return False, f"Unknown symbols in garden: {sorted(unknown)}"

    return True, ""
