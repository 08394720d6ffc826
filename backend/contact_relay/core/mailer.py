# contact_relay/core/mailer.py
import asyncio
import html
import smtplib
from email.errors import HeaderParseError
from email.message import EmailMessage
from email.utils import formataddr, parseaddr
from string import Template
from typing import Optional

from fastapi import Request

from contact_relay.core.errors import MailDeliveryError
from contact_relay.core.log_config import log
from contact_relay.lib.validation import ContactSubmission

VERIFY_TIMEOUT_SECONDS = 30.0

HTML_TEMPLATE = Template("""\
<!DOCTYPE html>
<html>
  <head>
    <style>
      .container {
        max-width: 600px;
        margin: 0 auto;
        padding: 20px;
        font-family: 'Inter', Arial, sans-serif;
        background-color: #0f172a;
        color: #e2e8f0;
      }
      .header {
        padding: 20px;
        border-radius: 8px;
        margin-bottom: 20px;
        background-color: #1e293b;
        border: 1px solid #334155;
      }
      .message-box {
        border-left: 4px solid #38bdf8;
        padding: 15px;
        margin: 20px 0;
        background-color: #1e293b;
        border-radius: 4px;
      }
      .footer {
        margin-top: 20px;
        padding-top: 20px;
        border-top: 1px solid #334155;
        font-size: 14px;
        color: #94a3b8;
      }
      h2 { color: #38bdf8; margin: 0; }
      p { line-height: 1.6; }
      .label { color: #38bdf8; font-weight: 600; margin-bottom: 4px; }
      .content {
        background-color: #1e293b;
        padding: 20px;
        border-radius: 8px;
        border: 1px solid #334155;
      }
    </style>
  </head>
  <body style="background-color: #0f172a; margin: 0; padding: 20px;">
    <div class="container">
      <div class="header">
        <h2>New Contact Message</h2>
      </div>
      <div class="content">
        <div class="label">From:</div>
        <p>$name</p>
        <div class="label">Email:</div>
        <p>$email</p>
        <div class="message-box">
          <div class="label">Message:</div>
          <p style="white-space: pre-wrap;">$message</p>
        </div>
      </div>
      <div class="footer">
        <p>This message was sent from your portfolio contact form.</p>
      </div>
    </div>
  </body>
</html>
""")


def render_html(submission: ContactSubmission) -> str:
    # user text is escaped; pre-wrap keeps the message's line breaks
    return HTML_TEMPLATE.substitute(
        name=html.escape(submission.name),
        email=html.escape(submission.email),
        message=html.escape(submission.message),
    )


def render_text(submission: ContactSubmission) -> str:
    return f"Name: {submission.name}\nEmail: {submission.email}\nMessage: {submission.message}"


def reply_to_address(address: str) -> Optional[str]:
    """The submitter's address if the email package can carry it unchanged, else None."""
    if parseaddr(address)[1] != address:
        return None
    scratch = EmailMessage()
    try:
        scratch["Reply-To"] = address
        parsed = scratch["Reply-To"].addresses
    except (ValueError, AttributeError, IndexError, TypeError, HeaderParseError):
        return None
    if len(parsed) != 1 or parsed[0].addr_spec != address:
        return None
    return address


class MailDispatcher:
    """Turns a validated submission into one email and hands it to the SMTP relay."""

    def __init__(self, settings):
        self.settings = settings

    def build_message(self, submission: ContactSubmission) -> EmailMessage:
        s = self.settings
        # a name with line breaks must not spill into other headers
        subject_name = " ".join(submission.name.split())

        msg = EmailMessage()
        msg["Subject"] = f"New contact message from {subject_name}"
        if s.sender_address:
            msg["From"] = formataddr((s.mail_from_name, s.sender_address))
        if s.mail_to:
            msg["To"] = s.mail_to
        # some addresses the form accepts cannot be parsed back; those get no Reply-To
        reply_to = reply_to_address(submission.email)
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(render_text(submission))
        msg.add_alternative(render_html(submission), subtype="html")
        return msg

    def _open(self, timeout: Optional[float] = None) -> smtplib.SMTP:
        s = self.settings
        kwargs = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        if s.smtp_use_ssl:
            return smtplib.SMTP_SSL(s.smtp_host, s.smtp_port, **kwargs)
        return smtplib.SMTP(s.smtp_host, s.smtp_port, **kwargs)

    def _handshake(self, smtp: smtplib.SMTP) -> None:
        s = self.settings
        if not s.smtp_use_ssl:
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls()
                smtp.ehlo()
        if s.smtp_user and s.smtp_password:
            smtp.login(s.smtp_user, s.smtp_password)

    def _deliver(self, msg: EmailMessage) -> None:
        with self._open(self.settings.smtp_timeout) as smtp:
            self._handshake(smtp)
            smtp.send_message(msg)

    def _check(self) -> None:
        # bounded so a silent relay cannot hold the worker thread past shutdown
        with self._open(self.settings.smtp_timeout or VERIFY_TIMEOUT_SECONDS) as smtp:
            self._handshake(smtp)
            smtp.noop()

    async def send(self, submission: ContactSubmission) -> None:
        """Make a single delivery attempt. Raises MailDeliveryError on failure."""
        msg = self.build_message(submission)
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            raise MailDeliveryError(str(exc) or exc.__class__.__name__) from exc
        log.info(f"[mailer] contact message from {submission.email} relayed to {self.settings.mail_to}")

    async def verify(self) -> bool:
        """Connect and authenticate once. The outcome is only logged."""
        try:
            await asyncio.to_thread(self._check)
        except Exception as exc:
            log.error(f"[mailer] email transport check failed: {exc}", exc_info=exc)
            return False
        log.info("[mailer] server is ready to send emails")
        return True


def get_dispatcher(request: Request) -> MailDispatcher:
    return request.app.state.dispatcher
