"""Command-line interface for the Monte Carlo e estimators."""

import argparse
from pathlib import Path

from laplace_e.config import cfg, logger
from laplace_e.sim.analysis import ConvergenceAnalyzer
from laplace_e.sim.run_simulation import EstimatorConfig, run_estimators


def format_report(laplace_e: float, simple_e: float) -> str:
    """Two-line report: Laplace estimate first, then the simple one."""
    return f"Laplace e:\t{laplace_e:f}\nSimple e:\t{simple_e:f}"


def estimate_cmd(args):
    """Run both estimators and print the report."""
    config = EstimatorConfig.from_settings(
        cfg,
        repetitions=getattr(args, "repetitions", None),
        steps=getattr(args, "steps", None),
        ensemble_size=getattr(args, "ensemble_size", None),
        random_seed=getattr(args, "seed", None),
    )

    results = run_estimators(config, parallel=getattr(args, "parallel", False))
    print(format_report(results["laplace_e"], results["simple_e"]))


def convergence_cmd(args):
    """Sweep distributional step counts and print a summary table."""
    logger.info("=" * 70)
    logger.info("Convergence sweep")
    logger.info("=" * 70)

    analyzer = ConvergenceAnalyzer(
        ensemble_size=args.ensemble_size if args.ensemble_size is not None else cfg.ENSEMBLE_SIZE,
        seed=args.seed if args.seed is not None else cfg.RANDOM_SEED,
        n_jobs=args.n_jobs if args.n_jobs is not None else cfg.N_JOBS,
        progress_bar=True,
    )

    steps_list = range(args.min_steps, args.max_steps + 1)
    df = analyzer.sweep_steps(steps_list, n_replicates=args.replicates)
    summary = analyzer.get_summary(df)

    print(summary.to_string(index=False, float_format=lambda x: f"{x:.6f}"))

    outpath = None
    if args.output:
        outpath = Path(args.output)
    elif args.save:
        outpath = cfg.results_dir / "convergence_summary.csv"

    if outpath is not None:
        outpath.parent.mkdir(parents=True, exist_ok=True)
        summary.to_csv(outpath, index=False)
        logger.info(f"Summary saved to: {outpath}")


def benchmark_cmd(args):
    """Time the pure-Python simple estimator against the numba kernel."""
    from laplace_e.simulation.numba_e import run_benchmark

    seed = args.seed if args.seed is not None else 42
    repetitions = args.repetitions if args.repetitions is not None else cfg.N_REPETITIONS
    run_benchmark(repetitions=repetitions, seed=seed)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Monte Carlo estimation of Euler's number",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Common arguments
    common_parser = argparse.ArgumentParser(add_help=False)
    common_parser.add_argument("--seed", type=int, default=None,
                               help="Random seed (default: wall-clock time)")
    common_parser.add_argument("--ensemble-size", type=int, default=None,
                               help=f"Ensemble size (default: {cfg.ENSEMBLE_SIZE})")

    # estimate subcommand
    est_parser = subparsers.add_parser(
        "estimate",
        parents=[common_parser],
        help="Run both estimators and print e",
    )
    est_parser.add_argument("--repetitions", type=int, default=None,
                            help=f"Simple estimator repetitions (default: {cfg.N_REPETITIONS})")
    est_parser.add_argument("--steps", type=int, default=None,
                            help=f"Laplace estimator steps (default: {cfg.N_STEPS})")
    est_parser.add_argument("--parallel", action="store_true",
                            help="Run the two estimators concurrently")
    est_parser.set_defaults(func=estimate_cmd)

    # convergence subcommand
    conv_parser = subparsers.add_parser(
        "convergence",
        parents=[common_parser],
        help="Sweep Laplace estimator steps",
    )
    conv_parser.add_argument("--min-steps", type=int, default=1)
    conv_parser.add_argument("--max-steps", type=int, default=15)
    conv_parser.add_argument("--replicates", type=int, default=5,
                             help="Replicates per step count")
    conv_parser.add_argument("--n-jobs", type=int, default=None,
                             help=f"Parallel workers (default: {cfg.N_JOBS})")
    conv_parser.add_argument("--output", "-o", default=None,
                             help="Write the summary table to this CSV path")
    conv_parser.add_argument("--save", action="store_true",
                             help="Write the summary table under the results directory "
                                  f"(default: {cfg.RESULTS_DIR}/convergence_summary.csv)")
    conv_parser.set_defaults(func=convergence_cmd)

    # benchmark subcommand
    bench_parser = subparsers.add_parser(
        "benchmark",
        help="Compare pure-Python and numba simple estimators",
    )
    bench_parser.add_argument("--repetitions", type=int, default=None)
    bench_parser.add_argument("--seed", type=int, default=None)
    bench_parser.set_defaults(func=benchmark_cmd)

    return parser


def main(argv=None):
    """Main CLI entry point with subcommands; defaults to ``estimate``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        args = parser.parse_args(["estimate"])

    args.func(args)


if __name__ == "__main__":
    main()
