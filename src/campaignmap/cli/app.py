"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys

from campaignmap.contracts.exceptions import ApiError, ConfigError, MarkerNotFoundError, PersistenceError


def main(argv: list[str] | None = None) -> int:
    import campaignmap.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        cli.logging.basicConfig(level=cli.logging.DEBUG, format="%(name)s %(message)s", stream=sys.stderr)

    try:
        if args.command == "serve":
            cli._run_serve(args)
            return 0
        ok = cli.asyncio.run(cli._COMMANDS[args.command](args))
        return 0 if ok else 4
    except KeyboardInterrupt:
        return 130
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except ApiError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except MarkerNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 5
    except PersistenceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 6
    except Exception as exc:  # pragma: no cover
        print(f"error: {exc}", file=sys.stderr)
        return 1


__all__ = ["main"]
