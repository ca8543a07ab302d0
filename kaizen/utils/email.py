"""이메일 발송 유틸리티 — SMTP (aiosmtplib).

SMTP 설정은 config.py의 SMTP_* 환경 변수로 관리.
로그인 코드 메일은 여기서 조립합니다.
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from kaizen.config import settings


async def send_email(
    to: str,
    subject: str,
    html: str,
    text: str | None = None,
) -> None:
    """이메일 발송.

    Args:
        to: 수신자 이메일 주소
        subject: 제목
        html: HTML 본문
        text: 플레인텍스트 본문 (없으면 생략)
    """
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
    msg["To"] = to

    if text:
        msg.attach(MIMEText(text, "plain", "utf-8"))
    msg.attach(MIMEText(html, "html", "utf-8"))

    await aiosmtplib.send(
        msg,
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER,
        password=settings.SMTP_PASSWORD,
        start_tls=True,
    )


async def send_login_code(to: str, name: str, code: str) -> None:
    """로그인 코드 메일 발송 — Deliver a one-time login code."""
    minutes = settings.OTP_EXPIRE_MINUTES
    await send_email(
        to=to,
        subject=f"[{settings.APP_NAME}] Your login code",
        html=(
            f"<p>Hello {name},</p>"
            f"<p>Your login code is <strong>{code}</strong>.</p>"
            f"<p>It expires in {minutes} minutes.</p>"
        ),
        text=f"Hello {name},\n\nYour login code is {code}. It expires in {minutes} minutes.",
    )
