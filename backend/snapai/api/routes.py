"""SnapAI API routes (session, generation, download)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel

from snapai.core.errors import SessionBusyError
from snapai.core.logging import log
from snapai.core.session import InteractionController

router = APIRouter()


def get_controller(request: Request) -> InteractionController:
    """Return the controller owned by the running application."""
    return request.app.state.controller


class PromptRequest(BaseModel):
    prompt: str


class CredentialRequest(BaseModel):
    credential: str


@router.get("/healthz")
async def healthz(controller: InteractionController = Depends(get_controller)) -> dict:
    return {
        "ok": True,
        "model": controller.client.model,
        "generating": controller.session.is_generating,
    }


@router.get("/session")
async def get_session(controller: InteractionController = Depends(get_controller)) -> dict:
    return controller.snapshot()


@router.put("/session/prompt")
async def set_prompt(
    body: PromptRequest,
    controller: InteractionController = Depends(get_controller),
) -> dict:
    """Replace the prompt text. Refused while an image is generating."""
    try:
        controller.set_prompt(body.prompt)
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return controller.snapshot()


@router.put("/session/credential")
async def set_credential(
    body: CredentialRequest,
    controller: InteractionController = Depends(get_controller),
) -> dict:
    controller.set_credential(body.credential)
    return controller.snapshot()


@router.post("/generate")
async def generate(controller: InteractionController = Depends(get_controller)) -> dict:
    """Generate one image from the session prompt.

    Returns:
        Dict with the new image and the notification shown to the user

    Raises:
        HTTPException: 400 if prompt or key is empty, 409 if a generation is
            already running, 502 if the image service fails
    """
    outcome = await controller.generate()

    if outcome.status == "busy":
        raise HTTPException(status_code=409, detail="An image is already being generated")
    if outcome.status == "invalid":
        raise HTTPException(status_code=400, detail=outcome.notification.message)
    if outcome.status == "failed":
        raise HTTPException(status_code=502, detail=outcome.notification.message)

    return {
        "ok": True,
        "image": outcome.image.to_dict(),
        "notification": outcome.notification.to_dict(),
    }


@router.get("/images/{index}/download")
async def download_image(
    index: int,
    controller: InteractionController = Depends(get_controller),
) -> Response:
    """Return the image bytes as an attachment named after its prompt."""
    try:
        outcome = await controller.download(index)
    except IndexError:
        log.warning(f"DOWNLOAD_UNKNOWN_IMAGE index={index}")
        raise HTTPException(status_code=404, detail=f"No image at index {index}")

    if outcome.status != "downloaded":
        raise HTTPException(status_code=502, detail=outcome.notification.message)

    download = outcome.download
    return Response(
        content=download.content,
        media_type=download.content_type,
        headers={"Content-Disposition": f'attachment; filename="{download.filename}"'},
    )
