from fastapi import APIRouter, Request
from fastapi.responses import Response

from proposal_studio.controllers import export_controller
from proposal_studio.core.export_layout import content_disposition
from proposal_studio.schemas.export import ExportRequest, ExportResponse

router = APIRouter(prefix="/export-pdf", tags=["export"])


@router.post("", response_model=ExportResponse)
async def export_pdf(payload: ExportRequest, request: Request):
    """Lay the document out as pages; ``downloadUrl`` renders the same body as a PDF."""
    download_url = str(request.url_for("export_pdf_file"))
    return export_controller.prepare_export(payload, download_url)


@router.post("/file", name="export_pdf_file")
async def export_pdf_file(payload: ExportRequest):
    content, filename = export_controller.export_pdf_file(payload)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(filename)},
    )
