"""
__main__ provides the console-script entrypoint for the bertinfer package.
"""
from __future__ import annotations

import sys
import traceback

from bertinfer.cli import CLI
from bertinfer.command import ClassifyCommand, InspectCommand
from bertinfer.infer.runner import ClassifyRunner, inspect_bundle
from bertinfer.weight.bundle import BundleReader


def main(argv: list[str] | None = None) -> None:
    """
    main is the entrypoint for the `bertinfer` console script.
    """
    try:
        command = CLI().parse_command(argv)

        match command:
            case ClassifyCommand() as c:
                ClassifyRunner(c.run).execute()
            case InspectCommand() as c:
                inspect_bundle(BundleReader.open(c.bundle))
            case _:
                raise ValueError(f"Invalid command payload: {type(command)!r}")
    except SystemExit as e:
        code = int(e.code) if isinstance(e.code, int) else 1
        if code == 0:
            raise
        sys.exit(code)
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        print(f"details: {e!r}", file=sys.stderr)
        sys.exit(1)
    except RuntimeError as e:
        print("runtime error while running bertinfer.", file=sys.stderr)
        print(f"details: {e!r}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"unexpected error: {type(e).__name__}: {e}", file=sys.stderr)
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
