# Copyright (c) 2026 Stephen P Smith
# MIT License

"""Read-only decoding of PennFat filesystem images"""

from .directory import (
    Dentry, decode_dentries, iter_dentries, PennFatError, PennFatSizeMismatchError,
    InvalidBlockNumberError, PennFatCorruptionError, CyclicChainError,
    DentryAlignmentError
)
from .handler import PennFatImage

__all__ = [
    'PennFatImage', 'Dentry', 'decode_dentries', 'iter_dentries',
    'PennFatError', 'PennFatSizeMismatchError', 'InvalidBlockNumberError',
    'PennFatCorruptionError', 'CyclicChainError', 'DentryAlignmentError',
]
