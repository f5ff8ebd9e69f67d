# endpoints/web_pages.py
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Request, Depends, Form
from fastapi.responses import RedirectResponse, HTMLResponse
from fastapi.templating import Jinja2Templates
from dependency_injector.wiring import inject, Provide

from config import Settings
from containers import Container
from dtos import ChatDTO
from repositories.chat_repo import ChatRepository
from .utils import get_current_user_id_from_request

BASE_DIR = Path(__file__).resolve().parent.parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
router = APIRouter(include_in_schema=False)


@router.get("/", response_class=HTMLResponse)
@inject
async def index(
    request: Request,
    user_id: Optional[str] = Depends(get_current_user_id_from_request),
    cr: ChatRepository = Depends(Provide[Container.chat_repo])
):
    if not user_id:
        return templates.TemplateResponse(request, "index.html", {"error": None})
    chats = await cr.list_chats_for_user(user_id)
    return templates.TemplateResponse(
        request,
        "chats.html",
        {"user_id": user_id, "chats": [ChatDTO.model_validate(c) for c in chats]},
    )


@router.post("/login")
@inject
async def login(
    request: Request,
    username: str = Form(...),
    settings: Settings = Depends(Provide[Container.settings])
):
    username = username.strip()
    if not username:
        return templates.TemplateResponse(request, "index.html", {"error": "Enter a user name"}, status_code=400)
    redirect = RedirectResponse(url="/", status_code=302)
    redirect.set_cookie(settings.identity_cookie, username, max_age=60*60*24*30, httponly=True, samesite="lax")
    return redirect


@router.get("/logout")
@inject
async def logout(settings: Settings = Depends(Provide[Container.settings])):
    r = RedirectResponse(url="/", status_code=302)
    r.delete_cookie(settings.identity_cookie)
    return r


@router.get("/chat/{chat_id}", response_class=HTMLResponse)
@inject
async def open_chat(
    request: Request,
    chat_id: str,
    user_id: Optional[str] = Depends(get_current_user_id_from_request),
    cr: ChatRepository = Depends(Provide[Container.chat_repo])
):
    if not user_id:
        return RedirectResponse(url="/", status_code=302)

    chat = await cr.get_chat_for_user(chat_id, user_id)
    if chat is None:
        return templates.TemplateResponse(request, "chat.html", {"user_id": user_id, "chat": None}, status_code=404)

    # history is fetched by the page script from /api/chats/{id}/messages
    return templates.TemplateResponse(
        request,
        "chat.html",
        {"user_id": user_id, "chat": ChatDTO.model_validate(chat)},
    )
