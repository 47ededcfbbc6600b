"""Integration tests for the notecanvas command line."""

import logging
import os
import pytest
from pathlib import Path
from unittest.mock import patch

from notecanvas.main import build_parser, main
from notecanvas.models import Position
from notecanvas.storage.note_store import NoteStore


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_file(temp_data_dir):
    path = Path(temp_data_dir) / "notecanvas.yaml"
    path.write_text(
        "storage:\n  notes_file: data/notes.json\n"
        "logging:\n  file_path: data/logs/notecanvas.log\n  console_output: false\n"
        "layout:\n  random_seed: 1\n",
        encoding="utf-8",
    )
    return str(path)


def notes_in(temp_data_dir):
    return NoteStore(str(Path(temp_data_dir) / "data" / "notes.json")).load()


@pytest.mark.integration
class TestCli:
    """Test cases for the import and organize commands."""

    def test_import_commits_notes(self, config_file, temp_data_dir):
        md = Path(temp_data_dir) / "trip.md"
        md.write_text("# Trip\n- [ ] pack bags\n- [ ] book hotel\n", encoding="utf-8")

        main(["--config", config_file, "import", str(md)])

        notes = notes_in(temp_data_dir)
        assert [note.title for note in notes] == ["Trip"]
        assert [task.text for task in notes[0].tasks] == ["pack bags", "book hotel"]
        assert (Path(temp_data_dir) / "data" / "logs" / "notecanvas.log").exists()

    def test_import_with_preview_can_be_declined(self, config_file, temp_data_dir):
        md = Path(temp_data_dir) / "trip.md"
        md.write_text("# Trip\n", encoding="utf-8")

        with patch("notecanvas.ui.preview_screen.Confirm.ask", return_value=False):
            main(["--config", config_file, "import", str(md), "--preview"])

        assert notes_in(temp_data_dir) == []

    def test_organize_by_grid_moves_stacked_notes(self, config_file, temp_data_dir):
        for name in ("a.md", "b.md", "c.md"):
            (Path(temp_data_dir) / name).write_text(f"# {name}\n", encoding="utf-8")
            main(["--config", config_file, "import", str(Path(temp_data_dir) / name)])
        assert len({note.position for note in notes_in(temp_data_dir)}) == 1

        main(["--config", config_file, "organize", "--style", "by-grid"])

        positions = [note.position for note in notes_in(temp_data_dir)]
        assert len(set(positions)) == 3
        assert Position(800 - 295, 450 - 235) in positions

    def test_dictate_without_api_key_adds_single_note(self, config_file, temp_data_dir):
        transcript = Path(temp_data_dir) / "memo.txt"
        transcript.write_text("Call the dentist and buy milk.", encoding="utf-8")

        with patch.dict(os.environ, {}, clear=True):
            main(["--config", config_file, "dictate", str(transcript), "--approve-all"])

        notes = notes_in(temp_data_dir)
        assert len(notes) == 1
        assert notes[0].is_voice_note
        assert notes[0].content.endswith("Call the dentist and buy milk.")

    def test_missing_config_exits_with_error(self, temp_data_dir):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(Path(temp_data_dir) / "nope.yaml"), "organize"])

        assert exc_info.value.code == 1

    def test_parser_requires_a_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
