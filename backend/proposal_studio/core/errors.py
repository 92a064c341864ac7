"""Domain exceptions raised by the core and translated to HTTP by controllers."""


class ProposalStudioError(Exception):
    """Base class for every error the service raises on purpose."""

    user_message = "Something went wrong. Please try again."


class GenerationError(ProposalStudioError):
    """The external text-generation call failed (network or service error)."""

    def __init__(self, document_type: str, cause: Exception | None = None):
        self.document_type = document_type
        self.cause = cause
        label = "proposal" if document_type == "proposal" else "pitch deck"
        self.user_message = f"Failed to generate {label}"
        super().__init__(f"{self.user_message}: {cause}" if cause else self.user_message)


class ExportError(ProposalStudioError):
    """Preparing or rendering an export failed."""

    user_message = "Failed to prepare PDF export"
