"""Services layer for NoteCanvas application logic."""

from .note_publisher import NotePublisher, NOTES_COMMITTED_TOPIC
from .preview_service import PreviewApprovalController
from .dictation_service import DictationService, build_categorizer, build_synthesizer
from .import_service import ImportService
from .organize_service import OrganizeService, ORGANIZE_STYLES

__all__ = [
    "NotePublisher",
    "NOTES_COMMITTED_TOPIC",
    "PreviewApprovalController",
    "DictationService",
    "build_categorizer",
    "build_synthesizer",
    "ImportService",
    "OrganizeService",
    "ORGANIZE_STYLES",
]
