"""Command-line interface for chunk generation and settlement expansion."""

import argparse
import logging
import time
from pathlib import Path

import structlog


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate an infinite seeded world chunk by chunk"
    )
    parser.add_argument(
        "--config", type=str, default=None, help="Config name or path (default: built-in defaults)"
    )
    parser.add_argument("--seed", type=str, default=None, help="Seed string (overrides config)")
    parser.add_argument(
        "--chunk-size", type=int, default=None, help="Chunk edge length (overrides config)"
    )
    parser.add_argument(
        "--cache-dir", type=str, default=None, help="Directory for persisted chunks (overrides config)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    chunk = subparsers.add_parser("chunk", help="Generate one chunk and print biome stats")
    chunk.add_argument("chunk_x", type=int, help="Chunk column")
    chunk.add_argument("chunk_y", type=int, help="Chunk row")
    chunk.add_argument(
        "--output", "-o", type=str, default=None, help="Directory to save the chunk file to"
    )

    expand = subparsers.add_parser("expand", help="Seed settlements on a chunk's coast and grow them")
    expand.add_argument("chunk_x", type=int, help="Chunk column")
    expand.add_argument("chunk_y", type=int, help="Chunk row")
    expand.add_argument("--count", type=int, default=None, help="Target settlement count")
    expand.add_argument(
        "--output",
        "-o",
        type=str,
        default="runs/expansion",
        help="Directory for Parquet output (default: runs/expansion)",
    )
    return parser


def _run_chunk(session, args: argparse.Namespace) -> None:
    from .terrain.persistence import FileChunkStore

    start_time = time.time()
    chunk = session.generate_chunk(args.chunk_x, args.chunk_y)
    gen_time = time.time() - start_time

    total = chunk.size * chunk.size
    print(f"Chunk ({chunk.chunk_x}, {chunk.chunk_y}) origin {chunk.origin}, {chunk.size}x{chunk.size}")
    print(f"Generated in {gen_time:.1f}s")
    print()
    for biome, count in sorted(chunk.biome_counts().items(), key=lambda item: -item[1]):
        print(f"  {biome.value:<18} {count:>8,} ({count / total * 100:.1f}%)")

    if args.output:
        store = FileChunkStore(Path(args.output), chunk.size)
        store.save(chunk, chunk.chunk_x, chunk.chunk_y)
        print()
        print(f"Saved to {store.path_for(chunk.chunk_x, chunk.chunk_y)}")


def _run_expand(session, args: argparse.Namespace) -> None:
    from .export import ExpansionLogWriter

    start_time = time.time()
    result = session.seed_settlements(args.chunk_x, args.chunk_y, args.count)
    gen_time = time.time() - start_time

    print(f"Expansion finished in {gen_time:.1f}s: {len(result.settlements)} settlements, {len(result.routes)} routes")
    for settlement in result.settlements:
        print(f"  {settlement.name:<14} {settlement.kind.value:<8} {settlement.position}")

    writer = ExpansionLogWriter(Path(args.output))
    writer.log_expansion(f"{session.seed.seed}:{args.chunk_x}:{args.chunk_y}", result)
    writer.close()
    print()
    print(f"Parquet written to {args.output}")


def main() -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args()
    _configure_logging(args.verbose)

    # Import here to avoid slow startup for --help
    from .config import Config, find_config, load_config
    from .session import WorldSession

    logger = structlog.get_logger()

    if args.config:
        try:
            config_path = find_config(args.config)
        except FileNotFoundError as e:
            parser.error(str(e))
        config = load_config(config_path)
        logger.info("config_loaded", path=str(config_path))
    else:
        config = Config()

    if args.seed is not None:
        config.world.seed = args.seed
    if args.chunk_size is not None:
        config.world.chunk_size = args.chunk_size
        config.terrain.chunk_size = args.chunk_size
    if args.cache_dir is not None:
        config.world.cache_dir = Path(args.cache_dir)
    if config.world.seed is None:
        parser.error("A seed is required (use --seed or set world.seed in the config)")

    session = WorldSession.from_config(config)

    if args.command == "chunk":
        _run_chunk(session, args)
    else:
        _run_expand(session, args)


if __name__ == "__main__":
    main()
