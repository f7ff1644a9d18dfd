"""
Color matrix operations for Tinted Image.

A color matrix is a 5x5 float transform applied to straight RGBA pixel
values normalized to 0..1. Pixels are treated as row vectors
``[r, g, b, a, 1]`` multiplied by the matrix, so row i holds the
contribution of input channel i to each output channel. The fifth column is
reserved and is never compared.

Constants:
    IDENTITY_MATRIX: Read-only identity matrix
    GREYSCALE_MATRIX: Read-only luma matrix mapping R, G and B to luminance

Functions:
    as_matrix: Coerce nested values into a read-only 5x5 matrix
    identity_matrix: Writable copy of the identity matrix
    greyscale_matrix: Writable copy of the greyscale matrix
    equals: Compare two matrices ignoring the fifth column
    is_identity: Check whether a matrix equals the identity
"""

from typing import Any

import numpy as np

from TI_Libs.constants import LUMA_BLUE, LUMA_GREEN, LUMA_RED, MATRIX_ROW_LENGTH

MATRIX_SIZE = MATRIX_ROW_LENGTH
COMPARED_COLUMNS = 4


def as_matrix(values: Any) -> np.ndarray:
    """
    Coerce values into a read-only 5x5 float32 color matrix.

    Args:
        values: Nested sequence or array with 5 rows of 5 floats

    Returns:
        A new read-only numpy array

    Raises:
        ValueError: If the values do not form a 5x5 matrix
    """
    matrix = np.array(values, dtype=np.float32)
    if matrix.shape != (MATRIX_SIZE, MATRIX_SIZE):
        raise ValueError(f"Color matrix must be 5x5, got shape {matrix.shape}")
    matrix.setflags(write=False)
    return matrix


IDENTITY_MATRIX = as_matrix(np.identity(MATRIX_SIZE))

GREYSCALE_MATRIX = as_matrix([
    [LUMA_RED, LUMA_RED, LUMA_RED, 0.0, 0.0],
    [LUMA_GREEN, LUMA_GREEN, LUMA_GREEN, 0.0, 0.0],
    [LUMA_BLUE, LUMA_BLUE, LUMA_BLUE, 0.0, 0.0],
    [0.0, 0.0, 0.0, 1.0, 0.0],
    [0.0, 0.0, 0.0, 0.0, 1.0],
])


def identity_matrix() -> np.ndarray:
    """Return a writable copy of the identity matrix."""
    return IDENTITY_MATRIX.copy()


def greyscale_matrix() -> np.ndarray:
    """Return a writable copy of the greyscale matrix."""
    return GREYSCALE_MATRIX.copy()


def equals(a: np.ndarray, b: np.ndarray) -> bool:
    """
    Compare two color matrices.

    Only the first four columns of all five rows are compared; the fifth
    column is reserved.

    Args:
        a: First color matrix
        b: Second color matrix

    Returns:
        True if all 20 compared entries are exactly equal
    """
    return bool(np.array_equal(a[:, :COMPARED_COLUMNS], b[:, :COMPARED_COLUMNS]))


def is_identity(matrix: np.ndarray) -> bool:
    """Check whether a color matrix equals the identity."""
    return equals(matrix, IDENTITY_MATRIX)
