"""
Explicit context threaded from the create step to the results step.

The browser used to park the generated document and the chosen template in
two storage blobs.  ``ResultsContext`` is the same information as a typed
payload; ``from_storage`` still understands the blob layout so old clients
keep working, and treats anything missing or unreadable as "no content".
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Literal

from pydantic import ValidationError

from proposal_studio.schemas.document import CamelModel, GeneratedDocument
from proposal_studio.schemas.rendering import DeckView, ProposalView
from proposal_studio.schemas.template import DocumentType, Template

logger = logging.getLogger(__name__)

GENERATED_CONTENT_KEY = "generatedContent"
DOCUMENT_TYPE_KEY = "documentType"
SELECTED_TEMPLATE_KEY = "selectedTemplate"


class ResultsContext(CamelModel):
    document: GeneratedDocument
    template_id: str | None = None

    @property
    def document_type(self) -> DocumentType:
        return self.document.document_type

    def to_storage(self) -> dict[str, str]:
        doc = self.document
        blob = {
            "success": True,
            "metadata": doc.metadata.model_dump(mode="json", by_alias=True),
        }
        if doc.document_type == DocumentType.proposal:
            blob["proposal"] = doc.proposal.model_dump(mode="json", by_alias=True)
        else:
            blob["pitchDeck"] = doc.pitch_deck.model_dump(mode="json")
        storage = {
            GENERATED_CONTENT_KEY: json.dumps(blob),
            DOCUMENT_TYPE_KEY: doc.document_type.value,
        }
        if self.template_id:
            storage[SELECTED_TEMPLATE_KEY] = self.template_id
        return storage

    @classmethod
    def from_storage(cls, storage: Mapping[str, str | None]) -> "ResultsContext | None":
        """Decode the storage blobs; ``None`` means there is nothing to show."""
        raw = storage.get(GENERATED_CONTENT_KEY)
        if not raw:
            return None
        try:
            blob = json.loads(raw)
            document_type = DocumentType(storage.get(DOCUMENT_TYPE_KEY) or DocumentType.proposal)
            document = GeneratedDocument(
                document_type=document_type,
                proposal=blob.get("proposal"),
                pitch_deck=blob.get("pitchDeck"),
                metadata=blob.get("metadata"),
            )
        except (ValueError, TypeError, AttributeError, ValidationError) as exc:
            logger.info("Discarding unreadable results context: %s", exc)
            return None
        return cls(document=document, template_id=storage.get(SELECTED_TEMPLATE_KEY) or None)


class CallToAction(CamelModel):
    label: str
    href: str


class ResultsView(CamelModel):
    status: Literal["ready", "empty"]
    message: str | None = None
    call_to_action: CallToAction | None = None
    document_type: DocumentType | None = None
    heading: str | None = None
    subtitle: str | None = None
    template: Template | None = None
    proposal: ProposalView | None = None
    deck: DeckView | None = None
