"""Command-line interface for imogen."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional

logger = logging.getLogger("imogen")


def setup_logger(log_path: Optional[Path] = None, verbose: bool = False) -> logging.Logger:
    """Set up the package logger for console and, optionally, a log file."""
    logger.setLevel(logging.DEBUG)

    # Clear any existing handlers
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(console_handler)

    if log_path is not None:
        file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger


def settings_from_args(args: argparse.Namespace):
    """Start from --config (or defaults) and apply any explicit overrides."""
    from imogen.config import Settings, load_settings

    settings = load_settings(args.config) if args.config else Settings()
    overrides = {
        name: getattr(args, name)
        for name in ("render_width", "output_width", "population_size", "num_genes", "max_age", "seed")
        if getattr(args, name) is not None
    }
    return settings.with_updates(**overrides)


def cmd_evolve(args: argparse.Namespace) -> int:
    """Evolve polygons towards a target image."""
    from imogen.plotting import save_history_plot
    from imogen.session import SimulationSession
    from imogen.utils.run_manager import RunManager

    settings = settings_from_args(args)
    target = Path(args.target)
    if args.generations < 0:
        raise ValueError(f"--generations must not be negative, got {args.generations}")
    if args.save_interval < 1:
        raise ValueError(f"--save-interval must be at least 1, got {args.save_interval}")

    run = RunManager(Path(args.output_dir)).create_run(target.stem, config=settings.to_dict())
    setup_logger(run.log_path, verbose=args.verbose)

    logger.info(f"Evolving {target} for {args.generations} generations")
    logger.info(f"  Population: {settings.population_size}, genes: {settings.num_genes}")
    logger.info(f"  Run directory: {run.run_dir}")

    session = SimulationSession(settings)
    start_time = time.time()
    try:
        env = session.load_target(target)
        logger.info(f"  Working size: {env.width}x{env.height}")
        for gen in range(1, args.generations + 1):
            session.step()
            if gen % args.save_interval == 0 or gen == args.generations:
                logger.info(
                    f"Generation {gen}: best {session.history[-1].best_fitness}, "
                    f"mean {session.history[-1].mean_fitness:.1f}"
                )
                session.save_best(run.get_image_path(f"best_gen_{gen:05d}"))
    except KeyboardInterrupt:
        logger.info("Interrupted, saving progress")
        status = "cancelled"
    except Exception:
        run.complete(status="failed", summary=session.status())
        raise
    else:
        status = "completed"

    elapsed = time.time() - start_time
    best = session.best()
    summary = dict(session.status(), elapsed_seconds=round(elapsed, 1))
    summary.pop('ages', None)

    if best is not None and best.get_fitness() is not None:
        session.save_best(run.get_image_path("best"))
        save_history_plot(session.history, run.get_image_path("fitness_history"))

    run.save_results(
        {
            'history': [r.to_dict() for r in session.history],
            'best': best.to_dict() if best is not None else None,
        },
        summary=summary,
    )
    run.complete(status=status, summary=summary)

    logger.info(session.describe())
    logger.info(f"Total time: {elapsed:.1f}s")
    logger.info(f"Results saved to {run.run_dir}")
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    """Render a saved creature genome to an image."""
    from imogen.drawing.fitness import draw_genes
    from imogen.genetic.genome import as_genome

    with open(args.genome) as f:
        data = json.load(f)

    # Accept a results.json, a creature dict or a bare list of genes
    if isinstance(data, dict) and 'best' in data:
        data = data['best']
    genes = as_genome(data['genome'] if isinstance(data, dict) else data)

    image = draw_genes(genes, args.width, args.height)
    output = Path(args.output)
    image.save(output)

    print(f"Rendered {len(genes)} genes to {output}")
    return 0


def cmd_runs(args: argparse.Namespace) -> int:
    """List previous runs, or delete all but the most recent ones."""
    from imogen.utils.run_manager import RunManager

    manager = RunManager(Path(args.output_dir))
    if args.cleanup is not None:
        if args.cleanup < 0:
            raise ValueError(f"--cleanup must not be negative, got {args.cleanup}")
        deleted = manager.cleanup_old_runs(keep_count=args.cleanup, dry_run=args.dry_run)
        verb = "Would delete" if args.dry_run else "Deleted"
        for run_id in deleted:
            print(f"{verb} {run_id}")
        print(f"{verb} {len(deleted)} runs")
        return 0

    runs = manager.list_runs(limit=args.limit)
    if not runs:
        print("No runs found")
        return 0

    print(f"{'Run':<45}{'Status':<12}{'Generation':>11}{'Best':>12}")
    print("-" * 80)
    for run in runs:
        summary = run.metadata.summary or {}
        print(f"{run.metadata.run_id:<45}{run.metadata.status:<12}"
              f"{summary.get('generation', '-'):>11}{summary.get('best_fitness', '-'):>12}")
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Evolve translucent polygons to approximate an image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    evolve_parser = subparsers.add_parser("evolve", help="Evolve towards a target image")
    evolve_parser.add_argument("target", help="Target image file")
    evolve_parser.add_argument("--generations", type=int, default=1000, help="Generations to run")
    evolve_parser.add_argument("--config", default=None, help="JSON settings file")
    evolve_parser.add_argument("--render-width", type=int, default=None, help="Working width in pixels")
    evolve_parser.add_argument("--output-width", type=int, default=None, help="Width of saved images")
    evolve_parser.add_argument("--population-size", type=int, default=None, help="Creatures per generation")
    evolve_parser.add_argument("--num-genes", type=int, default=None, help="Initial genome length")
    evolve_parser.add_argument("--max-age", type=int, default=None, help="Maximum creature age")
    evolve_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    evolve_parser.add_argument("--output-dir", default="output", help="Base output directory")
    evolve_parser.add_argument("--save-interval", type=int, default=100, help="Generations between saved images")
    evolve_parser.add_argument("--verbose", "-v", action="store_true", help="Log every generation")

    render_parser = subparsers.add_parser("render", help="Render a saved genome")
    render_parser.add_argument("genome", help="JSON file with a genome")
    render_parser.add_argument("--width", type=int, default=500, help="Image width")
    render_parser.add_argument("--height", type=int, default=500, help="Image height")
    render_parser.add_argument("--output", "-o", default="render.png", help="Output file")

    runs_parser = subparsers.add_parser("runs", help="List previous runs")
    runs_parser.add_argument("--output-dir", default="output", help="Base output directory")
    runs_parser.add_argument("--limit", type=int, default=20, help="Maximum runs to list")
    runs_parser.add_argument("--cleanup", type=int, default=None, metavar="KEEP",
                             help="Delete all but the KEEP most recent runs")
    runs_parser.add_argument("--dry-run", action="store_true", help="With --cleanup, only list what would go")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    commands = {
        "evolve": cmd_evolve,
        "render": cmd_render,
        "runs": cmd_runs,
    }

    try:
        return commands[args.command](args)
    except (OSError, ValueError) as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
