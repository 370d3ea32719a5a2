"""
atlas_intake.api.pages

Minimal server-rendered HTML for the contact form and admin dashboard.

Responsibilities:
- Render pages from plain data; every interpolated value is HTML-escaped.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from html import escape

from atlas_intake.auth.models import AdminIdentity
from atlas_intake.db.models import Submission

_STYLE = """
body{font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;
margin:2rem auto;max-width:960px;color:#134e4a;background:#f0fdfa}
table{border-collapse:collapse;width:100%}td,th{border:1px solid #94a3b8;padding:.4rem;
vertical-align:top;text-align:left}.errors{color:#dc2626}label{display:block;margin-top:.6rem}
"""


def _page(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html><html><head><meta charset='utf-8'>"
        f"<title>{escape(title)}</title><style>{_STYLE}</style></head>"
        f"<body>{body}</body></html>"
    )


def _options(values: Iterable[str], selected: str | None = None) -> str:
    return "".join(
        f"<option value='{escape(v, quote=True)}'{' selected' if v == selected else ''}>"
        f"{escape(v)}</option>"
        for v in values
    )


def contact_form(*, company_name: str, service_types: Sequence[str]) -> str:
    return _page(
        f"{company_name} - Contact Us",
        f"<h1>{escape(company_name)}</h1><h2>Contact Us</h2>"
        "<form method='post' action='/submit'>"
        "<label>Name <input name='name' required maxlength='255'></label>"
        "<label>Email <input name='email' type='email' maxlength='255'></label>"
        "<label>Phone <input name='phone' maxlength='50'></label>"
        "<label>Service <select name='service_type' required>"
        f"<option value=''>Select a service</option>{_options(service_types)}</select></label>"
        "<label>Message <textarea name='message' required maxlength='10000'></textarea></label>"
        "<button type='submit'>Send Message</button></form>",
    )


def success(*, company_name: str) -> str:
    return _page(
        "Thank you",
        f"<h1>Thank you!</h1><p>{escape(company_name)} received your message. "
        "We'll get back to you within 24 hours.</p><p><a href='/'>Back</a></p>",
    )


def error(*, title: str, messages: Sequence[str]) -> str:
    items = "".join(f"<li>{escape(m)}</li>" for m in messages)
    return _page(
        title,
        f"<h1>{escape(title)}</h1><div class='errors'><ul>{items}</ul></div>"
        "<p><a href='javascript:history.back()'>Go back</a></p>",
    )


def dashboard(
    *,
    submissions: Sequence[Submission],
    labels: Sequence[str],
    identity: AdminIdentity | None,
    status_filter: str | None = None,
) -> str:
    who = f"Signed in as {escape(identity.email)}" if identity is not None else "Auth disabled"
    filters = " | ".join(
        ["<a href='/admin'>all</a>"]
        + [f"<a href='/admin?status={escape(label, quote=True)}'>{escape(label)}</a>" for label in labels]
    )

    if not submissions:
        rows = "<tr><td colspan='8'>No submissions yet</td></tr>"
    else:
        rows = "".join(
            "<tr>"
            f"<td>{escape(s.name)}</td>"
            f"<td>{escape(s.email or 'N/A')}</td>"
            f"<td>{escape(s.phone or 'N/A')}</td>"
            f"<td>{escape(s.service_type)}</td>"
            f"<td>{escape(s.message)}</td>"
            f"<td>{escape(s.status)}</td>"
            f"<td>{s.created_at:%Y-%m-%d %H:%M}</td>"
            "<td><form method='post' action='/admin/update'>"
            f"<input type='hidden' name='id' value='{s.id}'>"
            f"<select name='status'>{_options(labels, selected=s.status)}</select>"
            "<button type='submit'>Update</button></form></td>"
            "</tr>"
            for s in submissions
        )

    heading = "Submissions" if status_filter is None else f"Submissions: {escape(status_filter)}"
    return _page(
        "Admin Panel",
        f"<h1>Contact Form Administration</h1><p class='who'>{who}</p><p>{filters}</p>"
        f"<h2>{heading} ({len(submissions)})</h2>"
        "<table><tr><th>Name</th><th>Email</th><th>Phone</th><th>Service</th>"
        "<th>Message</th><th>Status</th><th>Date</th><th></th></tr>"
        f"{rows}</table>",
    )
