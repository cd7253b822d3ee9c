"""
Per-paper actions: viewing, revealing, mailing, reviewing and annotating.

Every action first resolves a filename fragment to a single record of the
index, then hands the absolute path to an external tool. Annotations are
edited directly in the structured index, with the editor placed on the
paper's ``PDF_file`` line.
"""

from pathlib import Path
from typing import List

from ..core import get_config, get_logger
from ..core.config_loader import Config
from ..search import QueryEngine
from ..store import BibliographicRecord, RecordStore
from .launcher import Launcher

logger = get_logger(__name__)


def format_record(record: BibliographicRecord) -> str:
    """
    Render a record for the terminal.

    Args:
        record: Record to display.

    Returns:
        Multi-line text, fields first, then notes.
    """
    notes = record.notes
    lines = [
        f"File:     {record.filename}",
        f"Title:    {record.title}",
        f"Authors:  {record.authors_text}",
        f"Journal:  {record.venue}",
        f"Year:     {record.year}",
    ]

    if record.issue:
        lines.append(f"Issue:    {record.issue}")
    if record.pages:
        lines.append(f"Pages:    {record.pages}")

    lines.append(f"Tags:     {record.tags_text}")
    lines.append("")
    lines.append(f"Key question: {notes.key_question}")
    lines.append(f"Key results:  {notes.key_results}")
    lines.append(f"Key impact:   {notes.key_impact}")
    lines.append("Key points:")
    lines.extend(f"  - {point}" for point in notes.key_points if point)

    return "\n".join(lines)


class PaperActions:
    """
    Resolves filenames to records and runs actions on them.

    Lookups follow one policy everywhere: an exact filename wins, otherwise
    the fragment must match exactly one record.
    """

    def __init__(
        self,
        config: Config = None,
        store: RecordStore = None,
        engine: QueryEngine = None,
        launcher: Launcher = None
    ):
        """
        Initialize paper actions.

        Args:
            config: Configuration. Defaults to the global config.
            store: Record store. Built from config when omitted.
            engine: Query engine. Built on the store when omitted.
            launcher: External tool launcher. Built from config when omitted.
        """
        self.config = config or get_config()
        self.store = store or RecordStore(config=self.config)
        self.engine = engine or QueryEngine(config=self.config, store=self.store)
        self.launcher = launcher or Launcher(self.config.commands)

    def resolve_path(self, filename: str) -> Path:
        """
        Get the absolute path of the PDF a fragment refers to.

        Raises:
            RecordNotFoundError: If nothing matches.
            AmbiguousMatchError: If several records match.
        """
        record = self.engine.review_one(filename)
        return (Path(self.config.paths.pdf_directory) / record.filename).resolve()

    def open_pdf(self, filename: str) -> List[str]:
        """Open the matching PDF in the viewer."""
        return self.launcher.view(self.resolve_path(filename))

    def reveal(self, filename: str) -> List[str]:
        """Show the matching PDF in the file manager."""
        return self.launcher.reveal(self.resolve_path(filename))

    def mail(self, filename: str) -> List[str]:
        """Attach the matching PDF to a new email."""
        return self.launcher.mail(self.resolve_path(filename))

    def open_for_annotation(self, filename: str) -> int:
        """
        Open the structured index in the editor at the paper's entry.

        Args:
            filename: Full filename or a fragment of it.

        Returns:
            The line number the editor was pointed at.

        Raises:
            IndexNotFoundError: If the structured index does not exist.
            RecordNotFoundError: If nothing matches.
            AmbiguousMatchError: If several records match.
        """
        line = self.store.locate(filename)
        logger.info(f"Annotating {filename} at line {line}")

        self.launcher.edit(self.store.structured_path.resolve(), line)
        return line

    def review(self, filename: str) -> str:
        """Get the display text of the matching record."""
        return format_record(self.engine.review_one(filename))
