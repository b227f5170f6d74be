import asyncio, ssl, smtplib
from email.message import EmailMessage
from typing import Optional
from ekart.config import settings

async def send_email(to: str, subject: str, html: str, sender_name: Optional[str] = "EKart"):
    """
    Plain SMTP sender.
    - Port 465 opens an SSL connection; with smtp_use_starttls=True (587) STARTTLS is used.
    - The blocking smtplib work runs in the default executor.
    """
    from_addr = settings.smtp_from or settings.smtp_user
    if not (settings.smtp_host and settings.smtp_port and settings.smtp_user and settings.smtp_password and from_addr):
        raise RuntimeError("SMTP config missing: check host/port/user/password/from")

    msg = EmailMessage()
    msg["To"] = to
    msg["From"] = f"{sender_name} <{from_addr}>" if sender_name else from_addr
    msg["Subject"] = subject
    msg.set_content("View this message as HTML to see its content.")
    msg.add_alternative(html, subtype="html")

    def _send_blocking():
        context = ssl.create_default_context()
        if settings.smtp_use_starttls:
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
                server.ehlo()
                server.starttls(context=context)
                server.ehlo()
                server.login(settings.smtp_user, settings.smtp_password)
                server.send_message(msg)
        else:
            with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, context=context) as server:
                server.login(settings.smtp_user, settings.smtp_password)
                server.send_message(msg)

    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, _send_blocking)
