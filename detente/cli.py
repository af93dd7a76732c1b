"""
Detente CLI - Command-line interface for the engine.

Usage:
    detente play [--seed N] [--us AGENT] [--ussr AGENT] [--turns N]
    detente catalog
    detente serve [--host HOST] [--port PORT]
"""

import argparse
import logging
import sys

from .config import EngineConfig, configure_logging

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    from .bots.policy import AGENT_TYPES

    parser = argparse.ArgumentParser(
        description="Detente - Cold War card game decision engine",
        prog="detente",
    )
    parser.add_argument("--log-level", help="Override DETENTE_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a bot-vs-bot game")
    play_parser.add_argument("--seed", type=int, help="Random seed")
    play_parser.add_argument("--us", choices=sorted(AGENT_TYPES), default="heuristic")
    play_parser.add_argument("--ussr", choices=sorted(AGENT_TYPES), default="heuristic")
    play_parser.add_argument("--turns", type=int, help="Last turn to play")

    # Catalog command
    subparsers.add_parser("catalog", help="Print the flat action space layout")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    config = EngineConfig.from_env()
    if args.log_level:
        config.log_level = args.log_level.upper()
    configure_logging(config)

    if args.command == "play":
        return cmd_play(args, config)
    elif args.command == "catalog":
        return cmd_catalog(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_play(args, config):
    """Play one game and print the result."""
    from .bots.policy import make_agent
    from .engine_core.errors import EngineError
    from .engine_core.random_source import InternalRandom
    from .engine_core.state import GameState
    from .games.twilight.countries import Side
    from .session import GameLoop

    if args.seed is not None:
        config.seed = args.seed
    if args.turns is not None:
        config.turns = args.turns
    seed = config.seed

    agents = {
        Side.US: make_agent(args.us, Side.US, seed),
        Side.USSR: make_agent(args.ussr, Side.USSR, None if seed is None else seed + 1),
    }
    loop = GameLoop(GameState.new_game(), agents, InternalRandom(seed), config=config)
    try:
        win = loop.play()
    except EngineError as e:
        print(f"Error: {type(e).__name__}: {e}")
        sys.exit(1)

    state = loop.state
    print(f"{args.us} (US) vs {args.ussr} (USSR), seed {seed}")
    print(f"Winner: {win.side.name} ({win.reason}), margin {win.margin}")
    print(f"Turn {state.turn}, VP {state.vp}, DEFCON {state.defcon}")
    print(f"Choices made: {len(loop.history)}")
    return 0


def cmd_catalog(args):
    """Print each action kind's offset and arity."""
    from .engine_core.action import get_catalog

    catalog = get_catalog()
    print(f"{'kind':<16}{'offset':>8}{'arity':>8}")
    for kind in catalog.kinds:
        print(f"{kind.value:<16}{catalog.offset(kind):>8}{catalog.arity(kind):>8}")
    print(f"\nTotal size: {catalog.size}")
    return 0


def cmd_serve(args):
    """Run the API under uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install 'detente[api]'")
        sys.exit(1)
    from .api.app import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    main()
