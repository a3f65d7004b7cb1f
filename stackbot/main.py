#!/usr/bin/env python3
"""
stackbot command-line interface.
Headless demo games, one-off move suggestions and performance benchmarks.
"""

import argparse
import logging
import time
from typing import List, Optional

import numpy as np

from .config import BotConfig, load_config
from .core.board import Board
from .core.pieces import GENERATOR_KINDS, PieceType, make_generator
from .ai.evaluation import BoardEvaluator
from .ai.player import Autoplayer
from .ai.rollout import RolloutPlanner
from .ai.search import PlacementSearch


def build_config(args) -> BotConfig:
    """Load the config file (if any) and apply command-line overrides."""
    config = load_config(args.config) if args.config else BotConfig()
    data = config.to_dict()
    if getattr(args, 'seed', None) is not None:
        data['seed'] = args.seed
    if getattr(args, 'generator', None):
        data['generator'] = args.generator
    if getattr(args, 'no_lookahead', False):
        data['lookahead'] = False
    if getattr(args, 'rollouts', None) is not None:
        data['use_rollouts'] = True
        data['rollout']['rollouts'] = args.rollouts
    if getattr(args, 'depth', None) is not None:
        data['rollout']['depth'] = args.depth
    if getattr(args, 'workers', None) is not None:
        data['rollout']['workers'] = args.workers
    return BotConfig.from_dict(data)


def build_search(config: BotConfig) -> PlacementSearch:
    return PlacementSearch(BoardEvaluator(config.weights),
                           top_out_penalty=config.rollout.top_out_penalty)


def parse_rows(rows: List[str], width: int, height: int) -> Board:
    """Build a board from text rows ('#' or 'X' filled), stacked on the floor."""
    if len(rows) > height:
        raise ValueError(f"Got {len(rows)} rows for a board of height {height}")
    board = Board(width, height)
    offset = height - len(rows)
    for index, text in enumerate(rows):
        if len(text) != width:
            raise ValueError(f"Row {text!r} has {len(text)} cells, expected {width}")
        board.grid[offset + index] = np.array([ch in '#Xx' for ch in text], dtype=bool)
    return board


def demo_game(args, config: BotConfig):
    """Run a headless game with the bot."""
    print("stackbot demo")
    print("=" * 50)

    player = Autoplayer(config)
    mode = "rollouts" if config.use_rollouts else ("lookahead" if config.lookahead else "greedy")
    print(f"Board: {config.width}x{config.height}, planner: {mode}, generator: {config.generator}")
    print()

    def report(result):
        if result.placement is None:
            return
        if args.show_every and player.stats.pieces_placed % args.show_every == 0:
            print(f"\nPieces: {player.stats.pieces_placed}  Lines: {player.stats.lines_cleared}")
            print(str(player.board))

    player.on_turn = report

    start_time = time.time()
    stats = player.play(args.pieces)
    duration = time.time() - start_time

    print("\n" + "=" * 50)
    print("GAME OVER" if stats.game_over else "PIECE LIMIT REACHED")
    print("=" * 50)
    print(str(player.board))
    print(f"Pieces placed: {stats.pieces_placed}")
    print(f"Lines cleared: {stats.lines_cleared}")
    print(f"Duration: {duration:.2f} seconds")
    if duration > 0:
        print(f"Pieces per second: {stats.pieces_placed / duration:.1f}")


def suggest_move(args, config: BotConfig):
    """Print the best move for a piece on a given board."""
    board = parse_rows(args.row or [], config.width, config.height)
    piece = PieceType.from_name(args.piece)
    next_piece = PieceType.from_name(args.next) if args.next else None

    search = build_search(config)
    if config.use_rollouts:
        planner = RolloutPlanner(search, workers=config.rollout.workers)
        generator = make_generator(config.generator, config.seed)
        placement = planner.plan(board, piece, generator,
                                 config.rollout.rollouts, config.rollout.depth)
    else:
        placement = search.select_best(board, piece, next_piece if config.lookahead else None)

    if placement is None:
        print(f"No valid placement for {piece.name}")
        return

    rotation, column = placement.move
    print(f"Place {piece.name}: rotation {rotation}, column {column} (landing row {placement.row})")
    preview = board.clone()
    preview.commit(piece, placement.rotation, placement.origin)
    print(str(preview))


def benchmark(args, config: BotConfig):
    """Run performance benchmarks."""
    print("stackbot benchmark")
    print("=" * 50)

    search = build_search(config)
    evaluator = search.evaluator
    warmup_config = BotConfig.from_dict(dict(config.to_dict(), use_rollouts=False))
    player = Autoplayer(warmup_config)
    player.play(args.warmup)
    board = player.board
    print(f"Benchmark board after {player.stats.pieces_placed} pieces:")
    print(str(board))

    print("\nBenchmarking board evaluation...")
    start_time = time.time()
    for _ in range(1000):
        evaluator.score(board.grid)
    eval_time = time.time() - start_time
    print(f"Board evaluation: 1000 evaluations in {eval_time:.3f}s")
    if eval_time > 0:
        print(f"Evaluations per second: {1000 / eval_time:.0f}")

    print("\nBenchmarking placement search...")
    start_time = time.time()
    for piece in PieceType:
        for _ in range(10):
            search.select_best(board, piece, PieceType.T)
    search_time = time.time() - start_time
    print(f"Lookahead search: 70 searches in {search_time:.3f}s")
    if search_time > 0:
        print(f"Searches per second: {70 / search_time:.1f}")

    print("\nBenchmarking rollout planner...")
    planner = RolloutPlanner(search, workers=config.rollout.workers)
    generator = make_generator(config.generator, config.seed)
    start_time = time.time()
    planner.plan(board, PieceType.T, generator, args.rollouts, args.depth)
    rollout_time = time.time() - start_time
    print(f"Rollouts: {args.rollouts} x depth {args.depth} in {rollout_time:.3f}s")

    print("\nBenchmark completed")


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description="stackbot: tetromino placement engine")
    parser.add_argument('--config', help='JSON config file')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Demo command
    demo_parser = subparsers.add_parser('demo', help='Play a headless game')
    demo_parser.add_argument('--pieces', type=int, default=200, help='Maximum pieces to place')
    demo_parser.add_argument('--show-every', type=int, default=0, help='Print the board every N pieces')

    # Suggest command
    suggest_parser = subparsers.add_parser('suggest', help='Suggest a placement for a piece')
    suggest_parser.add_argument('piece', help='Piece to place (I, O, T, S, Z, J, L)')
    suggest_parser.add_argument('--next', help='Known next piece for lookahead')
    suggest_parser.add_argument('--row', action='append',
                                help="Board row, top to bottom, '#' filled and '.' empty (repeatable)")

    # Benchmark command
    benchmark_parser = subparsers.add_parser('benchmark', help='Run performance benchmarks')
    benchmark_parser.add_argument('--warmup', type=int, default=30, help='Pieces played before timing')

    for sub in (demo_parser, suggest_parser, benchmark_parser):
        sub.add_argument('--seed', type=int, help='Random seed for piece generation')
        sub.add_argument('--generator', choices=GENERATOR_KINDS, help='Next-piece generator')
        sub.add_argument('--no-lookahead', action='store_true', help='Ignore the next piece')
        sub.add_argument('--rollouts', type=int, help='Plan with this many rollouts per move')
        sub.add_argument('--depth', type=int, help='Pieces simulated per rollout')
        sub.add_argument('--workers', type=int, help='Worker processes for rollouts')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(message)s")

    if args.command is None:
        parser.print_help()
        print("\nFor a quick demo, run: stackbot demo")
        return

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    if args.command == 'demo':
        demo_game(args, config)
    elif args.command == 'suggest':
        try:
            suggest_move(args, config)
        except ValueError as e:
            parser.error(str(e))
    elif args.command == 'benchmark':
        if args.rollouts is None:
            args.rollouts = config.rollout.rollouts
        if args.depth is None:
            args.depth = config.rollout.depth
        benchmark(args, config)


if __name__ == "__main__":
    main()
