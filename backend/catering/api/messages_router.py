"""Messaging inbox API: customers write to the admins, admins triage and reply."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from catering.api.common import CamelModel, LongText, Title, pagination
from catering.db import message_utils
from catering.db.dependencies import get_sqlalchemy_session, get_current_user, require_admin
from catering.db.message_utils import message_to_dict
from catering.db.models import User


router = APIRouter(prefix="/api/messages", tags=["messages"])

MessageStatus = Literal["unread", "read", "replied"]


class SendMessageRequest(CamelModel):
    subject: Title
    message_content: LongText


class RespondRequest(CamelModel):
    admin_response: LongText


class MessageStatusRequest(CamelModel):
    status: MessageStatus


# ---------- Customer ----------

@router.post("", status_code=201, summary="Send a message to the admins")
async def send_message(
    request: SendMessageRequest,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(get_current_user),
):
    message = message_utils.create_message(session, current_user, request.subject, request.message_content)
    session.commit()
    return {"message": "Message sent successfully", "data": message_to_dict(message)}


@router.get("/my-messages", summary="List own messages")
async def my_messages(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(get_current_user),
):
    messages, total = message_utils.list_messages_for_user(session, current_user, page, limit)
    return {
        "messages": [message_to_dict(m) for m in messages],
        "pagination": pagination(page, limit, total),
    }


# ---------- Admin ----------

@router.get("/admin/all", summary="List all messages (admin)")
async def admin_all_messages(
    status: Optional[MessageStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    messages, total = message_utils.list_all_messages(session, status, page, limit)
    return {
        "messages": [message_to_dict(m, include_sender=True) for m in messages],
        "pagination": pagination(page, limit, total),
    }


@router.get("/admin/statistics", summary="Message statistics (admin)")
async def admin_statistics(
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    return message_utils.message_statistics(session)


@router.get("/admin/{message_id}", summary="Open a message (admin)")
async def admin_get_message(
    message_id: int,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    """Opening an unread message marks it read."""
    message = message_utils.mark_read(session, message_utils.get_message(session, message_id))
    session.commit()
    return {"message": message_to_dict(message, include_sender=True)}


@router.post("/admin/{message_id}/respond", summary="Respond to a message (admin)")
async def admin_respond(
    message_id: int,
    request: RespondRequest,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    message = message_utils.respond(session, message_id, request.admin_response)
    session.commit()
    return {"message": "Response sent successfully", "data": message_to_dict(message)}


@router.patch("/admin/{message_id}/status", summary="Override message status (admin)")
@router.patch("/{message_id}/status", summary="Override message status (admin)")
async def admin_update_status(
    message_id: int,
    request: MessageStatusRequest,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    """Explicit override: any of unread/read/replied may be set."""
    message = message_utils.set_status(session, message_id, request.status)
    session.commit()
    return {"message": "Message status updated successfully", "data": message_to_dict(message)}


@router.get("/{message_id}", summary="Get own message")
async def get_own_message(
    message_id: int,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(get_current_user),
):
    return {"message": message_to_dict(message_utils.get_own_message(session, message_id, current_user))}
