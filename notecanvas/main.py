"""Main application entry point for NoteCanvas."""

import sys
import asyncio
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from .config import NoteCanvasConfig
from .layout.engine import LayoutEngine
from .models.layout import LayoutSettings
from .services.dictation_service import DictationService, build_categorizer, layout_anchor
from .services.import_service import ImportService
from .services.note_publisher import NotePublisher
from .services.organize_service import ORGANIZE_STYLES, OrganizeService
from .services.preview_service import PreviewApprovalController
from .storage.note_store import NoteStore
from .ui.preview_screen import PreviewScreen

logger = logging.getLogger(__name__)


class App:
    """Wires the note store, publisher and preview controller together for one CLI run."""

    def __init__(self, config_path: Optional[str], log_level: Optional[str] = None):
        # Load configuration
        self.config = NoteCanvasConfig(config_path)
        # Set up logging (override config with command line if specified)
        setup_logging(self.config, log_level or self.config.get('logging.level', 'INFO'))

        self.console = Console()
        self.store = NoteStore(self.config.get_notes_file())
        self.publisher = NotePublisher()
        self.store.subscribe(self.publisher.topic)
        self.controller = PreviewApprovalController(self.publisher.get_callback())
        self.screen = PreviewScreen(self.controller, self.console)

    def dictate(self, transcript_file: str, approve_all: bool = False) -> int:
        text = read_text(transcript_file)
        service = DictationService(self.config, self.controller)
        batch = asyncio.run(service.process_transcript(text, self.store.list_notes()))
        if batch is None:
            self.console.print("Nothing to add.", style="yellow")
            return 0
        return self.screen.confirm_and_commit(approve_all=approve_all)

    def import_files(self, paths: List[str], preview: bool = False) -> int:
        service = ImportService(self.config, self.controller)
        batch = service.import_files(paths)
        if batch is None:
            self.console.print("No markdown files imported.", style="yellow")
            return 0
        return self.screen.confirm_and_commit(approve_all=not preview)

    def organize(self, style: str) -> int:
        notes = self.store.list_notes()
        if not notes:
            self.console.print("The canvas is empty.", style="yellow")
            return 0

        layout_engine = LayoutEngine(LayoutSettings.from_config(self.config))
        anchor = layout_anchor(self.config)
        if style == "by-ai":
            service = OrganizeService(layout_engine, anchor, categorizer=build_categorizer(self.config))
            organized = asyncio.run(service.organize_by_ai(notes))
        else:
            service = OrganizeService(layout_engine, anchor)
            organized = service.organize(notes, style)

        self.store.replace_notes(organized)
        self.console.print(f"✅ Organized {len(organized)} notes ({style})", style="bold green")
        return len(organized)

    def cleanup(self):
        self.controller.discard()
        self.store.unsubscribe()


def read_text(path: str) -> str:
    """Read a transcript file; ``-`` reads standard input."""
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def setup_logging(config, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    # Get log file path from config
    log_file_path = config.get('logging.file_path', 'data/logs/notecanvas.log')
    console_output = config.get('logging.console_output', True)

    # Create logs directory if it doesn't exist
    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    # Set up handlers
    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    # Log startup
    logger = logging.getLogger(__name__)
    logger.info("="*50)
    logger.info("NoteCanvas starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("="*50)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="NoteCanvas - turn dictation and markdown into laid-out canvas notes",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: built-in settings)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: logging.level from config)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="NoteCanvas v0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    dictate = subparsers.add_parser("dictate", help="Categorize a transcript into notes")
    dictate.add_argument("transcript", help="Transcript text file, or - for stdin")
    dictate.add_argument(
        "--approve-all",
        action="store_true",
        help="Add every previewed note without asking"
    )

    import_cmd = subparsers.add_parser("import", help="Import markdown files as notes")
    import_cmd.add_argument("files", nargs="+", help="Markdown files")
    import_cmd.add_argument(
        "--preview",
        action="store_true",
        help="Show the preview and ask before adding notes"
    )

    organize = subparsers.add_parser("organize", help="Re-arrange notes already on the canvas")
    organize.add_argument(
        "--style",
        choices=ORGANIZE_STYLES,
        default="by-grid",
        help="Arrangement style (default: by-grid)"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for NoteCanvas."""
    args = build_parser().parse_args(argv)

    app = None
    try:
        app = App(args.config, args.log_level)
        if args.command == "dictate":
            app.dictate(args.transcript, approve_all=args.approve_all)
        elif args.command == "import":
            app.import_files(args.files, preview=args.preview)
        else:
            app.organize(args.style)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    except Exception as e:
        print(f"❌ Error: {e}")
        logging.error(f"Application error: {e}")
        sys.exit(1)
    finally:
        if app is not None:
            app.cleanup()


if __name__ == "__main__":
    main()
