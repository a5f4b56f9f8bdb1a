"""Extraction of analyzable values from structured input.

The dispatcher accepts plain sequences, numpy arrays, nested mappings of
sequences (e.g. ``{"sales": [...], "costs": [...]}``) and free text. This
module flattens such input into one Dataset, applying the generic
``ignore_keys_regex`` and ``path_filter`` options and the numeral flags,
and keeps count of everything that could not be used so the validator and
diagnoser can report it.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

import numpy as np

from lawkit.core.numerals import normalize_numeral
from lawkit.core.options import LawkitOptions
from lawkit.core.types import FloatArray

_WORD = re.compile(r"\w+")


@dataclass(frozen=True)
class Dataset:
    """
    Values extracted from one input, plus bookkeeping about what was dropped.

    Attributes:
        path: Source identifier reported on every result
        values: Finite numeric values in input order (read-only array)
        total_count: Number of leaf entries considered
        missing_count: Leaves that were None or NaN
        non_numeric_count: Leaves that could not be parsed as numbers
        non_finite_count: Leaves that parsed to +/-Inf
        tokens: Words from non-numeric text leaves, lower-cased
    """

    path: str
    values: FloatArray
    total_count: int = 0
    missing_count: int = 0
    non_numeric_count: int = 0
    non_finite_count: int = 0
    tokens: tuple[str, ...] = field(default=(), repr=False)

    @property
    def size(self) -> int:
        """Number of usable numeric values."""
        return int(self.values.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    @property
    def usable_fraction(self) -> float:
        """Share of leaf entries that produced a usable value."""
        if self.total_count == 0:
            return 0.0
        return self.size / self.total_count


def extract_dataset(data: Any, options: LawkitOptions, path: str = "data") -> Dataset:
    """
    Flatten raw input into a Dataset.

    Args:
        data: Sequence, numpy array, nested mapping, text, or None
        options: Resolved options (numeral flags, key/path filters)
        path: Source identifier to attach to the dataset

    Returns:
        Dataset with finite values and counts of dropped entries
    """
    if isinstance(data, np.ndarray) and data.dtype.kind in "iuf" and options.path_filter is None:
        return _from_array(data, path)

    collector = _Collector(options)
    if isinstance(data, str):
        collector.add_text(data)
    elif data is not None:
        collector.walk(data, "")

    values = np.array(collector.values, dtype=np.float64)
    values.setflags(write=False)
    return Dataset(
        path=path,
        values=values,
        total_count=collector.total,
        missing_count=collector.missing,
        non_numeric_count=collector.non_numeric,
        non_finite_count=collector.non_finite,
        tokens=tuple(collector.tokens),
    )


def as_dataset(data: Any, options: LawkitOptions, path: str = "data") -> Dataset:
    """Return `data` unchanged if it is already a Dataset, else extract one."""
    if isinstance(data, Dataset):
        return data
    return extract_dataset(data, options, path)


def _from_array(data: np.ndarray, path: str) -> Dataset:
    flat = np.asarray(data, dtype=np.float64).ravel()
    nan_mask = np.isnan(flat)
    inf_mask = np.isinf(flat)
    values = flat[~(nan_mask | inf_mask)].copy()
    values.setflags(write=False)
    return Dataset(
        path=path,
        values=values,
        total_count=int(flat.shape[0]),
        missing_count=int(nan_mask.sum()),
        non_finite_count=int(inf_mask.sum()),
    )


class _Collector:
    """Recursive walker accumulating values and drop counts."""

    def __init__(self, options: LawkitOptions) -> None:
        self.ignore = options.ignore_keys_regex
        self.path_filter = options.path_filter
        self.japanese = options.law.enable_japanese_numerals
        self.international = options.law.enable_international_numerals
        self.values: list[float] = []
        self.tokens: list[str] = []
        self.total = 0
        self.missing = 0
        self.non_numeric = 0
        self.non_finite = 0

    def walk(self, node: Any, node_path: str) -> None:
        if isinstance(node, Mapping):
            for key, child in node.items():
                key_text = str(key)
                if self.ignore is not None and self.ignore.search(key_text):
                    continue
                child_path = f"{node_path}.{key_text}" if node_path else key_text
                self.walk(child, child_path)
        elif isinstance(node, (list, tuple, np.ndarray)):
            for index, child in enumerate(node):
                self.walk(child, f"{node_path}[{index}]")
        else:
            if self.path_filter is not None and self.path_filter not in node_path:
                return
            self.add_leaf(node)

    def add_text(self, text: str) -> None:
        for piece in text.split():
            self.add_leaf(piece)

    def add_leaf(self, leaf: Any) -> None:
        self.total += 1
        if leaf is None:
            self.missing += 1
            return

        number = normalize_numeral(
            leaf, japanese=self.japanese, international=self.international
        )
        if number is None:
            self.non_numeric += 1
            if isinstance(leaf, str):
                self.tokens.extend(_WORD.findall(leaf.lower()))
            return
        if math.isnan(number):
            self.missing += 1
        elif math.isinf(number):
            self.non_finite += 1
        else:
            self.values.append(number)
