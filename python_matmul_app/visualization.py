"""Heatmap rendering of the operands and product using matplotlib."""

import os

try:
    import matplotlib
    matplotlib.use('Agg')  # Non-interactive backend by default
    import matplotlib.pyplot as plt
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False

from results import MultiplicationResult

_TITLES = {
    'a': 'Matrix A',
    'b': 'Matrix B',
    'product': 'Result of A x B',
}

# Cells are annotated only while the grid stays readable
_MAX_ANNOTATED_CELLS = 400


class MatrixPlotter:
    """Draws A, B and A x B from a MultiplicationResult as annotated heatmaps."""

    def __init__(self, result: MultiplicationResult):
        if not HAS_MATPLOTLIB:
            raise ImportError(
                "matplotlib is required for visualization. "
                "Install with: pip install matplotlib"
            )
        self.result = result

    def _get_values(self, name):
        if name not in _TITLES:
            raise ValueError(f"Unknown matrix name: {name!r} (expected one of {sorted(_TITLES)})")
        return getattr(self.result, name)

    def plot_matrix(self, name, ax=None, save_path=None):
        """Heatmap of one matrix: 'a', 'b' or 'product'."""
        values = self._get_values(name)

        own_fig = ax is None
        if own_fig:
            fig, ax = plt.subplots(figsize=(6, 5))

        image = ax.imshow(values, cmap='viridis', aspect='auto')
        ax.figure.colorbar(image, ax=ax)

        rows, cols = len(values), len(values[0])
        if rows * cols <= _MAX_ANNOTATED_CELLS:
            for i_row in range(rows):
                for i_col in range(cols):
                    ax.text(i_col, i_row, str(values[i_row][i_col]),
                            ha='center', va='center', color='white', fontsize=8)

        ax.set_title(f"{_TITLES[name]} ({rows}x{cols})")
        ax.set_xlabel('Column')
        ax.set_ylabel('Row')

        if save_path and own_fig:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
            plt.close(fig)

        return ax

    def plot_all(self, save_dir=None):
        """1x3 subplot grid: A, B, A x B."""
        fig, axes = plt.subplots(1, 3, figsize=(18, 5))
        fig.suptitle(
            f'Matrix product: {os.path.basename(self.result.input_path)} '
            f'(overflow={self.result.overflow_mode})',
            fontsize=13
        )

        self.plot_matrix('a', ax=axes[0])
        self.plot_matrix('b', ax=axes[1])
        self.plot_matrix('product', ax=axes[2])

        fig.tight_layout(rect=[0, 0, 1, 0.93])

        if save_dir:
            os.makedirs(save_dir, exist_ok=True)
            fig.savefig(
                os.path.join(save_dir, 'matrices.png'),
                dpi=150, bbox_inches='tight'
            )

        return fig
