import logging

from proposal_studio.core.errors import ExportError
from proposal_studio.core.export_layout import (
    build_export_payload,
    export_filename,
    layout_as_pages,
    render_pdf,
)
from proposal_studio.core.templates import get_template
from proposal_studio.schemas.export import ExportRequest, ExportResponse, Page, PdfData

logger = logging.getLogger(__name__)


def _layout(request: ExportRequest) -> tuple[PdfData, list[Page]]:
    template = get_template(request.requested_template_id(), request.document_type)
    try:
        payload = build_export_payload(
            request.typed_content(), request.document_type, request.metadata, template
        )
        pages = layout_as_pages(payload, template)
    except Exception as exc:
        logger.error("Export layout failed: %s", exc, exc_info=True)
        raise ExportError(str(exc)) from exc
    return payload, pages


def prepare_export(request: ExportRequest, download_url: str) -> ExportResponse:
    payload, pages = _layout(request)
    logger.info(
        "Prepared %s export for %r: %d page(s)",
        request.document_type.value, payload.company, len(pages),
    )
    return ExportResponse(pdf_data=payload, pages=pages, download_url=download_url)


def export_pdf_file(request: ExportRequest) -> tuple[bytes, str]:
    """PDF bytes and a download filename for *request*."""
    payload, pages = _layout(request)
    return render_pdf(pages, title=payload.title), export_filename(payload)
