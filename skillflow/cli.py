"""
Command-line interface for the skill flow editor.

Usage:
    python -m skillflow.cli inspect skill.json          Print the execution tree
    python -m skillflow.cli roundtrip skill.json -o out.json
                                                       Load into the graph and export again
    python -m skillflow.cli edit skill.json             Edit the tree in the TUI
"""

import argparse
import logging
import sys
from pathlib import Path

from skillflow.config import Config, load_config, setup_logging
from skillflow.editor import SkillEditorStore
from skillflow.editor.outline import format_outline
from skillflow.exceptions import SkillFlowError

logger = logging.getLogger(__name__)


def _load_store(path: str, config: Config) -> SkillEditorStore:
    store = SkillEditorStore(config=config)
    store.import_json(Path(path).read_text(encoding="utf-8"))
    return store


def cmd_inspect(args: argparse.Namespace) -> int:
    """Print the execution tree and graph diagnostics."""
    try:
        store = _load_store(args.file, args.config_obj)
    except (OSError, SkillFlowError) as e:
        logger.error(f"Failed to load {args.file}: {e}")
        print(f"Error: {e}")
        return 1

    print(format_outline(store.tree))
    print()
    print(f"Graph: {len(store.graph.nodes)} nodes, {len(store.graph.edges)} edges")

    result = store.validate()
    for error in result.errors:
        print(f"  error: {error}")
    for warning in result.warnings:
        print(f"  warning: {warning}")
    return 0 if result.valid else 1


def cmd_roundtrip(args: argparse.Namespace) -> int:
    """Materialize the tree, reconstruct it, and write the result."""
    try:
        store = _load_store(args.file, args.config_obj)
        text = store.export_json()
    except (OSError, SkillFlowError) as e:
        logger.error(f"Round trip failed for {args.file}: {e}")
        print(f"Error: {e}")
        return 1

    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote {args.output}")
    else:
        print(text)
    return 0


def cmd_edit(args: argparse.Namespace) -> int:
    """Open the skill in the TUI editor."""
    from skillflow.tui import SkillFlowTUI

    path = Path(args.file)
    try:
        if path.exists():
            store = _load_store(args.file, args.config_obj)
        else:
            logger.info(f"{path} does not exist; starting from an empty skill")
            store = SkillEditorStore(config=args.config_obj)
    except (OSError, SkillFlowError) as e:
        logger.error(f"Failed to load {args.file}: {e}")
        print(f"Error: {e}")
        return 1

    app = SkillFlowTUI(store, save_path=path)
    app.run()
    if app.saved_path:
        print(f"Saved to: {app.saved_path}")
    log_file = getattr(app, "final_log_file", None)
    if log_file:
        print(f"Session log: {log_file}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Skill flow editor - edit skill execution trees as graphs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level override",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    inspect_parser = subparsers.add_parser("inspect", help="Print a skill's execution tree")
    inspect_parser.add_argument("file", help="Skill definition JSON file")
    inspect_parser.set_defaults(func=cmd_inspect)

    roundtrip_parser = subparsers.add_parser(
        "roundtrip", help="Convert a skill to a graph and back"
    )
    roundtrip_parser.add_argument("file", help="Skill definition JSON file")
    roundtrip_parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Write the result here instead of stdout",
    )
    roundtrip_parser.set_defaults(func=cmd_roundtrip)

    edit_parser = subparsers.add_parser("edit", help="Edit a skill in the TUI")
    edit_parser.add_argument("file", help="Skill definition JSON file (created on save)")
    edit_parser.set_defaults(func=cmd_edit)

    args = parser.parse_args(argv)

    # Load config and set up logging
    config = load_config(args.config)
    if args.log_level:
        config.logging.level = args.log_level
    if args.command != "edit":
        setup_logging(config.logging)
    args.config_obj = config

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
