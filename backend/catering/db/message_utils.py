"""Customer-to-admin messaging inbox helpers."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from catering.db.models import Message, User, MESSAGE_STATUSES
from catering.errors import NotFoundError, ValidationError
from catering.utils.money import generate_code
from catering.utils.time_utils import isoformat_or_none, now_local_naive

logger = logging.getLogger(__name__)


def message_to_dict(message: Message, include_sender: bool = False) -> Dict[str, Any]:
    data = {
        "id": message.id,
        "messageId": message.message_code,
        "userId": message.user_id,
        "subject": message.subject,
        "messageContent": message.message_content,
        "adminResponse": message.admin_response,
        "messageStatus": message.message_status,
        "createdAt": isoformat_or_none(message.created_at),
        "updatedAt": isoformat_or_none(message.updated_at),
    }
    if include_sender and message.user is not None:
        data.update({
            "firstName": message.user.first_name,
            "lastName": message.user.last_name,
            "email": message.user.email,
            "phoneNumber": message.user.phone_number,
        })
    return data


def create_message(session: Session, sender: User, subject: str, content: str) -> Message:
    subject = (subject or "").strip()
    content = (content or "").strip()
    if not subject or not content:
        raise ValidationError("subject and messageContent are required")

    message = Message(
        message_code=generate_code("MSG"),
        user_id=sender.id,
        subject=subject,
        message_content=content,
        message_status="unread",
    )
    session.add(message)
    session.flush()
    logger.info("[messages] %s sent by user %s", message.message_code, sender.id)
    return message


def _paginate(session: Session, stmt, page: int, limit: int) -> Tuple[List[Message], int]:
    total = session.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    rows = session.execute(
        stmt.order_by(Message.created_at.desc(), Message.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).scalars().all()
    return list(rows), total


def list_messages_for_user(session: Session, user: User, page: int = 1, limit: int = 10) -> Tuple[List[Message], int]:
    stmt = select(Message).where(Message.user_id == user.id)
    return _paginate(session, stmt, page, limit)


def list_all_messages(
    session: Session, status: Optional[str] = None, page: int = 1, limit: int = 10
) -> Tuple[List[Message], int]:
    stmt = select(Message).options(selectinload(Message.user))
    if status:
        if status not in MESSAGE_STATUSES:
            raise ValidationError(f"Invalid status: {status}")
        stmt = stmt.where(Message.message_status == status)
    return _paginate(session, stmt, page, limit)


def get_own_message(session: Session, message_id: int, user: User) -> Message:
    message = session.get(Message, message_id)
    if message is None or message.user_id != user.id:
        raise NotFoundError("Message not found")
    return message


def get_message(session: Session, message_id: int) -> Message:
    message = session.get(Message, message_id)
    if message is None:
        raise NotFoundError("Message not found")
    return message


def mark_read(session: Session, message: Message) -> Message:
    """Advance unread -> read; other states are left alone."""
    if message.message_status == "unread":
        message.message_status = "read"
        message.updated_at = now_local_naive()
        session.flush()
    return message


def respond(session: Session, message_id: int, response_text: str) -> Message:
    """Store the admin response and force the message to 'replied'."""
    response_text = (response_text or "").strip()
    if not response_text:
        raise ValidationError("adminResponse is required")
    message = get_message(session, message_id)
    message.admin_response = response_text
    message.message_status = "replied"
    message.updated_at = now_local_naive()
    session.flush()
    return message


def set_status(session: Session, message_id: int, status: str) -> Message:
    """Admin override: any status may be set explicitly."""
    if status not in MESSAGE_STATUSES:
        raise ValidationError("Invalid status")
    message = get_message(session, message_id)
    message.message_status = status
    message.updated_at = now_local_naive()
    session.flush()
    return message


def message_statistics(session: Session) -> Dict[str, Any]:
    def count(*conditions):
        stmt = select(func.count()).select_from(Message)
        for condition in conditions:
            stmt = stmt.where(condition)
        return session.execute(stmt).scalar_one()

    recent = session.execute(
        select(Message).options(selectinload(Message.user))
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(5)
    ).scalars().all()

    return {
        "statistics": {
            "totalMessages": count(),
            "unreadMessages": count(Message.message_status == "unread"),
            "repliedMessages": count(Message.message_status == "replied"),
        },
        "recentMessages": [message_to_dict(m, include_sender=True) for m in recent],
    }
