#!/usr/bin/env python3
"""
lshkde command-line interface.

Usage:
    python -m lshkde                    # Benchmark CKNS against exact KDE
    python -m lshkde --n 5000 --eps 0.5 # Benchmark with custom sizes
    python -m lshkde --check            # Check dependencies
    python -m lshkde --version          # Show version
"""

import argparse
import sys

import numpy as np


def main(argv=None):
    """Command-line interface for lshkde."""
    from . import __version__

    parser = argparse.ArgumentParser(
        prog='lshkde',
        description='LSHKDE - approximate Gaussian KDE with layered LSH',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m lshkde                              # Default benchmark
  python -m lshkde --n 20000 --d 10 --eps 0.5   # Larger dataset
  python -m lshkde --check                      # Dependency report
"""
    )

    parser.add_argument('--version', action='version', version=f'lshkde {__version__}')
    parser.add_argument('--check', action='store_true', help='Check system requirements and exit')
    parser.add_argument('--n', type=int, default=2000, help='Number of data points')
    parser.add_argument('--d', type=int, default=3, help='Data dimension')
    parser.add_argument('--queries', type=int, default=100, help='Number of query points')
    parser.add_argument('--bandwidth', type=float, default=1.0, help='Gaussian bandwidth a')
    parser.add_argument('--eps', type=float, default=0.5, help='Accuracy parameter in (0, 1]')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--workers', type=int, default=None, help='Worker pool size')
    parser.add_argument('--progress', action='store_true', help='Show progress bars')

    args = parser.parse_args(argv)

    if args.check:
        from .utils.diagnostics import check_system_requirements, missing_requirements
        requirements = check_system_requirements(verbose=True)
        return 1 if missing_requirements(requirements) else 0

    return run_benchmark(args)


def run_benchmark(args) -> int:
    """Build both engines on a Gaussian dataset and compare their answers."""
    from . import configure, KDEEngine, ExactEngine, InvalidArgumentError
    from .utils.logging import Timer, memory_info
    from .utils.random import rng_key, random_seed

    configure(show_progress=args.progress)
    seed = args.seed if args.seed is not None else random_seed()
    rng = rng_key(seed)

    data = rng.standard_normal((args.n, args.d))
    queries = rng.standard_normal((args.queries, args.d))

    print("=" * 60)
    print(f"LSHKDE BENCHMARK  n={args.n} d={args.d} queries={args.queries} "
          f"a={args.bandwidth} eps={args.eps} seed={seed}")
    print("=" * 60)

    try:
        with Timer("CKNS build", track_memory=True) as build_timer:
            engine = KDEEngine(data, args.bandwidth, args.eps, seed=seed, num_workers=args.workers)
        exact_engine = ExactEngine(data, args.bandwidth, num_workers=args.workers)
    except InvalidArgumentError as e:
        print(f"Invalid arguments: {e}", file=sys.stderr)
        return 2

    print(f"   {engine}")
    with Timer("CKNS query") as approx_timer:
        approx = engine.query(queries)
    with Timer("Exact query") as exact_timer:
        exact = exact_engine.query(queries)

    print("\nSummary:")
    print(f"   - Build: {build_timer.elapsed:.2f}s, {engine.num_hash_units} hash units")
    print(f"   - Query: CKNS {approx_timer.elapsed:.3f}s vs exact {exact_timer.elapsed:.3f}s")

    # Relative error is undefined where the exact density underflows to zero.
    positive = exact > 0.0
    if positive.any():
        rel_err = np.abs(approx[positive] - exact[positive]) / exact[positive]
        print(f"   - Relative error: mean {rel_err.mean():.3f}, median {np.median(rel_err):.3f}, "
              f"max {rel_err.max():.3f}")
    else:
        print("   - Relative error: n/a (no query with positive exact density)")
    skipped = int(exact.size - positive.sum())
    if skipped:
        print(f"   - Skipped {skipped} queries with zero exact density")
    print(f"   - Resident memory: {memory_info()['rss_mb']:.0f} MB")
    return 0


if __name__ == "__main__":
    sys.exit(main())
