from typing import Any, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from signed_assets.core.dependencies import get_rewriter
from signed_assets.core.rewrite import AssetURLRewriter, RenderHook

router = APIRouter(prefix="/rewrite")


class RewriteContentRequest(BaseModel):
    text: str
    hook: RenderHook = RenderHook.CONTENT


class RewriteContentResponse(BaseModel):
    text: str


class RewriteURLRequest(BaseModel):
    url: str = Field(...)


class RewriteURLResponse(BaseModel):
    url: str


class RewriteImageSrcRequest(BaseModel):
    # [url, width, height, is_intermediate] as handed out for attachment images
    image: List[Any] | None = None


class RewriteImageSrcResponse(BaseModel):
    image: List[Any] | None = None


@router.post("/content", response_model=RewriteContentResponse)
def rewrite_content(
    payload: RewriteContentRequest,
    rewriter: AssetURLRewriter = Depends(get_rewriter),
):
    """Rewrite rendered markup (post body, thumbnail, widget, avatar, attachment URL)."""
    if payload.hook == RenderHook.ATTACHMENT_IMAGE_SRC:
        # image-src records go through /rewrite/image-src; treat the text as one URL
        return {"text": rewriter.rewrite_url(payload.text)}
    return {"text": rewriter.rewrite_for_hook(payload.hook, payload.text)}


@router.post("/url", response_model=RewriteURLResponse)
def rewrite_url(
    payload: RewriteURLRequest,
    rewriter: AssetURLRewriter = Depends(get_rewriter),
):
    return {"url": rewriter.rewrite_url(payload.url)}


@router.post("/image-src", response_model=RewriteImageSrcResponse)
def rewrite_image_src(
    payload: RewriteImageSrcRequest,
    rewriter: AssetURLRewriter = Depends(get_rewriter),
):
    image = rewriter.rewrite_for_hook(RenderHook.ATTACHMENT_IMAGE_SRC, payload.image)
    return {"image": list(image) if image is not None else None}
