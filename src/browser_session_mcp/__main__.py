"""Entry point for running the browser session MCP server."""

import signal
import sys


def _interrupt(signum, frame):
    raise KeyboardInterrupt


def main() -> int:
    """Main entry point."""
    from .server import run_server

    # SIGTERM shuts down like Ctrl-C so the lifespan closes the browser
    signal.signal(signal.SIGTERM, _interrupt)

    try:
        run_server()
        return 0
    except KeyboardInterrupt:
        print("\nShutdown requested...", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
