# touristlog/mailer.py
from typing import Iterable, Optional, Sequence, Tuple, Union

from flask import current_app
from flask_mail import Message

from touristlog.extensions import mail

Attachment = Tuple[str, str, bytes]  # (filename, mimetype, raw_bytes)


def send_mail(
    subject: str,
    recipients: Union[str, Sequence[str]],
    *,
    body: Optional[str] = None,
    html: Optional[str] = None,
    attachments: Optional[Iterable[Attachment]] = None,
    sender: Optional[str] = None,
) -> None:
    recips = [recipients] if isinstance(recipients, str) else list(recipients or [])
    msg = Message(
        subject=subject,
        sender=sender or current_app.config.get("MAIL_DEFAULT_SENDER"),
        recipients=recips,
    )
    if body:
        msg.body = body
    if html:
        msg.html = html
    for (fn, ctype, data) in (attachments or []):
        msg.attach(fn, ctype, data)
    mail.send(msg)
