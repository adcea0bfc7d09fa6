"""Structured result data model for a multiplication run with JSON/CSV export."""

import json
import csv
from dataclasses import dataclass, asdict
from typing import List, Optional, Tuple


@dataclass
class MultiplicationResult:
    """Operands, product and run parameters of a single A x B computation."""
    input_path: str
    a: List[List[int]]
    b: List[List[int]]
    product: List[List[int]]
    overflow_mode: str
    threads: int
    wall_clock_seconds: float
    timestamp: str
    verified: Optional[bool] = None  # None when the numpy cross-check was not requested

    @property
    def a_shape(self) -> Tuple[int, int]:
        return (len(self.a), len(self.a[0]))

    @property
    def b_shape(self) -> Tuple[int, int]:
        return (len(self.b), len(self.b[0]))

    @property
    def product_shape(self) -> Tuple[int, int]:
        return (len(self.product), len(self.product[0]))

    @classmethod
    def from_matrices(cls, input_path, a, b, product, overflow_mode, threads,
                      wall_clock_seconds, timestamp, verified=None) -> 'MultiplicationResult':
        """Snapshot three live matrices into a result."""
        return cls(
            input_path=input_path,
            a=a.get_data(),
            b=b.get_data(),
            product=product.get_data(),
            overflow_mode=overflow_mode.value,
            threads=threads,
            wall_clock_seconds=wall_clock_seconds,
            timestamp=timestamp,
            verified=verified,
        )

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        d = asdict(self)
        d['a_shape'] = list(self.a_shape)
        d['b_shape'] = list(self.b_shape)
        d['product_shape'] = list(self.product_shape)
        return d

    def to_json(self, filepath: str) -> None:
        """Export the result to a JSON file."""
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def to_csv(self, filepath: str) -> None:
        """Export the product matrix to a CSV file, one row per line."""
        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerows(self.product)

    @classmethod
    def from_json(cls, filepath: str) -> 'MultiplicationResult':
        """Load a result from a JSON file."""
        with open(filepath, 'r', encoding='utf-8') as f:
            d = json.load(f)

        # Shapes are derived from the matrices
        for key in ('a_shape', 'b_shape', 'product_shape'):
            d.pop(key, None)

        return cls(**d)
