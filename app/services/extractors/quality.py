"""Final success / partial-success / failure decision."""

from __future__ import annotations

import logging

from app.services.extractors.base import ExtractionConfig, Outcome, QualityVerdict

logger = logging.getLogger(__name__)

FAILURE_CAUSES = (
    "the page requires login before the note is visible",
    "the page layout changed and the note could not be located",
    "anti-bot protection blocked or altered the response",
)

MANUAL_ENTRY_HINT = "Please enter the title and places manually."


class QualityGate:
    """Classify an extraction attempt by the validity of its fields."""

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    def is_content_valid(self, content: str) -> bool:
        return (
            bool(content)
            and content != self.config.placeholder_content
            and len(content) >= self.config.min_content_length
        )

    def is_title_valid(self, title: str) -> bool:
        return bool(title) and title != self.config.placeholder_title

    def classify(self, title: str, content: str, login_wall: bool = False) -> QualityVerdict:
        """Decide the outcome and build the caller-facing message.

        Valid content means success whatever the title; a valid title alone
        is a partial success; neither is a failure with a diagnostic.
        """
        title_valid = self.is_title_valid(title)
        content_valid = self.is_content_valid(content)

        if content_valid:
            outcome = Outcome.SUCCESS
            message = "Note parsed successfully."
        elif title_valid:
            outcome = Outcome.PARTIAL_SUCCESS
            message = (
                f"Parsed the title \"{title}\" but could not extract the note content. "
                "Please add the content manually."
            )
        else:
            outcome = Outcome.FAILURE
            message = self._failure_message(login_wall)

        logger.info(
            "Quality gate: %s (title_valid=%s, content_valid=%s)",
            outcome.value,
            title_valid,
            content_valid,
        )
        return QualityVerdict(
            outcome=outcome,
            message=message,
            title_valid=title_valid,
            content_valid=content_valid,
        )

    @staticmethod
    def _failure_message(login_wall: bool) -> str:
        lead = "Could not extract the note."
        if login_wall:
            lead += " The page shows a login prompt, so it most likely requires login."
        causes = "; ".join(FAILURE_CAUSES)
        return f"{lead} Possible causes: {causes}. {MANUAL_ENTRY_HINT}"
