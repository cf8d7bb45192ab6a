"""Command-line interface for bertinfer.

Commands:
- (default): classify a prompt with a BERT sequence classifier
- inspect: list the tensors stored in a safetensors bundle
"""
from __future__ import annotations

import argparse
from pathlib import Path

from pydantic import ValidationError

from bertinfer.command import ClassifyCommand, Command, InspectCommand
from bertinfer.config.run import DEFAULT_MODEL_ID, DEFAULT_PROMPT, RunConfig


class _Args(argparse.Namespace):
    """Typed namespace for CLI arguments."""

    command: str | None = None
    bundle: Path | None = None

    prompt: str = DEFAULT_PROMPT
    number: int = 1
    model_id: str = DEFAULT_MODEL_ID
    directory: Path = Path(".")
    device: str = "auto"
    download: bool = False


class CLI(argparse.ArgumentParser):
    """Prompt-first command-line interface.

    Running without a subcommand classifies the prompt; the inspect
    subcommand looks inside a bundle.
    """

    def __init__(self) -> None:
        """Set up CLI with subcommands and classification arguments."""
        super().__init__(
            prog="bertinfer",
            description="Classify text with a BERT model loaded from safetensors.",
        )

        _ = self.add_argument(
            "--version",
            action="version",
            version="%(prog)s 0.1.0",
            help="Show the version and exit.",
        )

        subparsers = self.add_subparsers(
            dest="command",
            parser_class=argparse.ArgumentParser,
        )
        inspect_parser = subparsers.add_parser(
            "inspect",
            help="List the tensors of a safetensors bundle.",
        )
        _ = inspect_parser.add_argument(
            "bundle",
            type=Path,
            metavar="bundle",
            help="Path to a .safetensors file.",
        )

        _ = self.add_argument(
            "-p",
            "--prompt",
            type=str,
            default=DEFAULT_PROMPT,
            help="Prompt to run.",
        )
        _ = self.add_argument(
            "-n",
            "--number",
            type=int,
            default=1,
            help="Number of times to run the prompt.",
        )
        _ = self.add_argument(
            "--model-id",
            type=str,
            default=DEFAULT_MODEL_ID,
            dest="model_id",
            help="Hub model id the local files are named after.",
        )
        _ = self.add_argument(
            "--dir",
            type=Path,
            default=Path("."),
            dest="directory",
            help="Directory holding the model, tokenizer and config files.",
        )
        _ = self.add_argument(
            "--device",
            type=str,
            default="auto",
            help="Compute device: auto, cpu, cuda or cuda:N.",
        )
        _ = self.add_argument(
            "--download",
            action="store_true",
            default=False,
            help="Fetch missing files from the Hugging Face Hub.",
        )

    def parse_command(self, argv: list[str] | None = None) -> Command:
        """Parse CLI arguments into a typed command payload."""
        args = self.parse_args(argv, namespace=_Args())

        match args.command:
            case "inspect":
                if args.bundle is None:
                    raise ValueError("inspect requires a bundle path.")
                return InspectCommand(bundle=args.bundle)
            case None:
                try:
                    run = RunConfig(
                        prompt=args.prompt,
                        number=args.number,
                        model_id=args.model_id,
                        directory=args.directory,
                        device=args.device,
                        download=args.download,
                    )
                except ValidationError as e:
                    self.error(str(e))
                return ClassifyCommand(run=run)
            case _:
                raise ValueError(f"Invalid command: {args.command}")
