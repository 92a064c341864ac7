from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import HTMLResponse

from proposal_studio.controllers import results_controller
from proposal_studio.schemas.rendering import DeckView, NavigationRequest
from proposal_studio.schemas.results import ResultsView

router = APIRouter(prefix="/results", tags=["results"])


@router.post("/view", response_model=ResultsView, response_model_exclude_none=True)
async def results_view(payload: Any = Body(default=None)):
    """Render a results context (or the legacy storage blobs); anything unreadable is the empty state."""
    context = results_controller.context_from_payload(payload)
    return results_controller.build_results_view(context)


@router.post("/html", response_class=HTMLResponse)
async def results_html(payload: Any = Body(default=None)):
    context = results_controller.context_from_payload(payload)
    html = results_controller.build_results_html(context)
    if html is None:
        return HTMLResponse(
            f"<p>{results_controller.EMPTY_MESSAGE}</p>"
            f'<a href="{results_controller.CREATE_CTA.href}">{results_controller.CREATE_CTA.label}</a>',
            status_code=404,
        )
    return HTMLResponse(html)


@router.post("/deck/navigate", response_model=DeckView)
async def navigate_deck(payload: NavigationRequest):
    return results_controller.navigate_deck(payload)
