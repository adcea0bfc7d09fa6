#!/usr/bin/env python3
"""
Matrix Multiplier - Console Version
Reads matrices A and B from a text file, multiplies them and prints A, B and A x B.
"""
import sys
import argparse
import os
import time
from datetime import datetime

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from enums import OverflowMode
from errors import MatrixError, MatrixIOError, VerificationError
from matrix_reader import read_matrices
from multiplier import multiply, verify_product
from results import MultiplicationResult
from settings import Settings, DEFAULT_INPUT_FILE


def run(settings):
    """Read both operands, multiply them and collect the run result.

    Nothing is printed here; any failure propagates as a MatrixError.

    Returns:
        tuple: ((matrix_a, matrix_b, result_mtx), MultiplicationResult)
    """
    start_time = time.time()

    matrix_a, matrix_b = read_matrices(settings.get_input_path())
    result_mtx = multiply(
        matrix_a, matrix_b,
        overflow_mode=settings.get_overflow_mode(),
        threads=settings.get_threads(),
    )

    verified = None
    if settings.is_verify():
        verified = verify_product(matrix_a, matrix_b, result_mtx)
        if not verified:
            raise VerificationError("Product does not match the numpy cross-check")

    elapsed = time.time() - start_time

    mult_result = MultiplicationResult.from_matrices(
        settings.get_input_path(), matrix_a, matrix_b, result_mtx,
        overflow_mode=settings.get_overflow_mode(),
        threads=settings.get_threads(),
        wall_clock_seconds=elapsed,
        timestamp=datetime.now().isoformat(),
        verified=verified,
    )

    return (matrix_a, matrix_b, result_mtx), mult_result


def print_report(matrix_a, matrix_b, result_mtx, file=None):
    """Print the three matrices in the fixed report layout."""
    out = file if file is not None else sys.stdout
    print("Matrix A:", file=out)
    matrix_a.print(file=out)
    print("Matrix B:", file=out)
    matrix_b.print(file=out)
    print("Result of A x B:", file=out)
    result_mtx.print(file=out)


def export_results(mult_result, args):
    """Write the optional JSON/CSV/plot outputs requested on the command line."""
    for path, writer in ((args.output_json, mult_result.to_json),
                         (args.output_csv, mult_result.to_csv)):
        if not path:
            continue
        try:
            writer(path)
        except OSError as e:
            raise MatrixIOError(path, e.strerror or str(e)) from e

    if args.plot_save:
        try:
            from visualization import MatrixPlotter
            import matplotlib.pyplot as plt
            plotter = MatrixPlotter(mult_result)
        except ImportError:
            print("Warning: matplotlib is not installed, skipping plots. "
                  "Install with: pip install matplotlib", file=sys.stderr)
            return

        try:
            fig = plotter.plot_all(save_dir=args.plot_save)
        except OSError as e:
            raise MatrixIOError(args.plot_save, e.strerror or str(e)) from e
        plt.close(fig)


def _positive_int(value):
    i_value = int(value)
    if i_value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return i_value


def build_parser():
    parser = argparse.ArgumentParser(
        description='Matrix Multiplier - multiplies two integer matrices read from a file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input format (whitespace separated):
  <rows_A> <cols_A> <rows_A * cols_A values> <rows_B> <cols_B> <rows_B * cols_B values>

Examples:
  python main.py
  python main.py --input matrices.txt --overflow checked --verify
  python main.py --input big.txt --threads 4 --output-json result.json
        """
    )

    parser.add_argument('--input', '-i', type=str, default=DEFAULT_INPUT_FILE,
                        help=f'Path to the input file (default: {DEFAULT_INPUT_FILE})')
    parser.add_argument('--overflow', type=str, choices=['wrap', 'checked'], default='wrap',
                        help='Overflow handling: wrap=32-bit two\'s complement, '
                             'checked=fail on overflow (default: wrap)')
    parser.add_argument('--threads', '-t', type=_positive_int, default=1,
                        help='Number of worker processes for the multiplication (default: 1)')
    parser.add_argument('--verify', action='store_true',
                        help='Cross-check the product with numpy')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print settings and timing to stderr')

    # Export flags
    parser.add_argument('--output-json', type=str, default=None,
                        help='Export the run to a JSON file')
    parser.add_argument('--output-csv', type=str, default=None,
                        help='Export the product matrix to a CSV file')
    parser.add_argument('--plot-save', type=str, default=None,
                        help='Save heatmaps of A, B and A x B to the given directory')

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    settings = Settings()
    settings.set_input_path(args.input)
    settings.set_threads(args.threads)
    settings.set_verify(args.verify)
    if args.overflow == 'checked':
        settings.set_overflow_mode(OverflowMode.CHECKED)
    else:
        settings.set_overflow_mode(OverflowMode.WRAP)

    if args.verbose:
        settings.print(file=sys.stderr)

    try:
        (matrix_a, matrix_b, result_mtx), mult_result = run(settings)
        export_results(mult_result, args)
    except MatrixError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    with matrix_a, matrix_b, result_mtx:
        print_report(matrix_a, matrix_b, result_mtx)

    if args.verbose:
        print(f"Computed in {mult_result.wall_clock_seconds:.4f} sec", file=sys.stderr)
        if mult_result.verified:
            print("Product verified with numpy", file=sys.stderr)

    return 0


if __name__ == '__main__':
    sys.exit(main())
