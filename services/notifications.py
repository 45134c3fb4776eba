"""
Email notifications sent to societies.

Message bodies are plain templates; delivery goes through core.mailer.
"""

import csv
import html
import io
import logging
from typing import Iterable, List, Optional

from core.mailer import Mailer, MailerError
from models.event import Event
from models.rsvp import RSVP
from models.society import Society

logger = logging.getLogger(__name__)

RSVP_CSV_HEADER = ["Name", "Email", "RSVP Date"]

REJECTION_TEMPLATE = (
    "Hello,\n\n"
    "Your event \"{event_name}\" was rejected by the admin.\n\n"
    "Reason: {reason}\n\n"
    "If you have questions, please contact support."
)


def notify_event_rejected(mailer: Mailer, event: Event, reason: Optional[str] = None) -> bool:
    """
    Tell the owning society that its event was rejected.

    Delivery problems never propagate: the rejection has already been stored
    and stays in place whether or not the email goes out.

    Returns:
        True if the email was handed to the SMTP relay
    """
    society = event.society
    recipient = society.contact_email if society else None
    if not recipient:
        logger.warning(f"No contact email for society of event {event.id}; rejection email skipped")
        return False

    try:
        mailer.send(
            to=recipient,
            subject=f"Your event \"{event.name}\" was rejected",
            text=REJECTION_TEMPLATE.format(
                event_name=event.name,
                reason=reason or "No reason provided.",
            ),
        )
    except MailerError as e:
        logger.error(f"Rejection email for event {event.id} to {recipient} failed: {e}")
        return False

    logger.info(f"Rejection email for event {event.id} sent to {recipient}")
    return True


def build_rsvp_csv(rsvps: Iterable[RSVP]) -> str:
    """Render an event's RSVP list as CSV with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(RSVP_CSV_HEADER)
    for rsvp in rsvps:
        user = rsvp.user
        writer.writerow([
            user.name if user else "",
            user.email if user else "",
            rsvp.created_at.date().isoformat(),
        ])
    return buffer.getvalue()


def _csv_to_html_table(csv_text: str) -> str:
    rows: List[List[str]] = list(csv.reader(io.StringIO(csv_text)))
    if not rows:
        return ""
    head = "".join(
        f"<th style='border:1px solid #ccc;padding:8px;background:#f3f3f3;'>{html.escape(h)}</th>"
        for h in rows[0]
    )
    body = "".join(
        "<tr>" + "".join(
            f"<td style='border:1px solid #ccc;padding:8px;'>{html.escape(cell)}</td>" for cell in row
        ) + "</tr>"
        for row in rows[1:]
    )
    return (
        "<table style=\"border-collapse:collapse;width:100%;\">"
        f"<thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"
    )


def send_rsvp_list(mailer: Mailer, society: Society, event: Event, csv_text: str) -> None:
    """
    Email an event's RSVP list to the society contact.

    Raises:
        MailerError: If delivery fails; here the email is the whole point of
            the request, so the caller reports the failure.
    """
    mailer.send(
        to=society.contact_email,
        subject=f"RSVP List for Event \"{event.name}\"",
        text=f"Here is the RSVP list for your event \"{event.name}\":\n\n{csv_text}",
        html=f"<h2>RSVP List for \"{html.escape(event.name)}\"</h2>{_csv_to_html_table(csv_text)}",
    )
    logger.info(f"RSVP list for event {event.id} sent to {society.contact_email}")
