from datetime import date
from typing import Any
from urllib.parse import quote

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from resume_builder.utils.filesystem import sanitize_filename

TYPE_LABELS = {
    "resume": "RESUME",
    "cover-letter": "COVER LETTER",
    "resignation-letter": "RESIGNATION LETTER",
    "other-letter": "OTHER LETTER",
}


def _latin1(text: Any) -> str:
    """Encode to latin-1, replacing unsupported chars; fpdf built-in fonts are latin-1 only."""
    return str(text).encode("latin-1", errors="replace").decode("latin-1")


def _section(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _entries(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def _join(*parts: Any, sep: str = " | ") -> str:
    return sep.join(str(p) for p in parts if p)


def _date_range(start: str | None, end: str | None, ongoing: bool) -> str:
    end_label = "Present" if ongoing else end
    if start and end_label:
        return f"{start} - {end_label}"
    return start or end_label or ""


class _Writer:
    def __init__(self, pdf: FPDF):
        self.pdf = pdf

    def line(self, text: Any, size: int = 10, style: str = "", height: float = 5):
        if not text:
            return
        self.pdf.set_font("Helvetica", style, size)
        self.pdf.multi_cell(0, height, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def heading(self, text: str):
        self.pdf.ln(4)
        self.line(text.upper(), size=12, style="B", height=7)
        self.pdf.set_draw_color(200, 200, 200)
        self.pdf.line(20, self.pdf.get_y(), 190, self.pdf.get_y())
        self.pdf.ln(2)

    def gap(self, height: float = 4):
        self.pdf.ln(height)


def _render_resume(w: _Writer, data: dict):
    personal = _section(data.get("personal"))
    w.line(personal.get("fullName"), size=16, style="B", height=8)
    w.line(_join(personal.get("email"), personal.get("phone"), personal.get("location")))
    if personal.get("summary"):
        w.heading("Summary")
        w.line(personal["summary"])

    experience = _entries(data.get("experience"))
    if experience:
        w.heading("Experience")
        for job in experience:
            w.line(_join(job.get("position"), job.get("company"), sep=" - "), style="B")
            w.line(_join(
                job.get("location"),
                _date_range(job.get("startDate"), job.get("endDate"), bool(job.get("isCurrentJob"))),
            ), size=9)
            w.line(job.get("description"))
            w.gap(2)

    education = _entries(data.get("education"))
    if education:
        w.heading("Education")
        for school in education:
            degree = _join(school.get("degree"), school.get("fieldOfStudy"), sep=" in ")
            w.line(_join(degree, school.get("institution"), sep=" - "), style="B")
            w.line(_join(
                school.get("location"),
                _date_range(school.get("startDate"), school.get("endDate"), bool(school.get("isCurrentStudent"))),
                f"GPA {school['gpa']}" if school.get("gpa") else None,
            ), size=9)
            w.line(school.get("description"))
            w.gap(2)

    skills = _entries(data.get("skills"))
    if skills:
        w.heading("Skills")
        by_category: dict[str, list[str]] = {}
        for skill in skills:
            name = skill.get("name")
            if not name:
                continue
            if skill.get("proficiency"):
                name = f"{name} ({skill['proficiency']})"
            by_category.setdefault(skill.get("category") or "Other", []).append(name)
        for category, names in by_category.items():
            w.line(f"{category}: {', '.join(names)}")

    projects = _entries(data.get("projects"))
    if projects:
        w.heading("Projects")
        for project in projects:
            w.line(_join(project.get("name"), project.get("role"), sep=" - "), style="B")
            w.line(_join(
                project.get("technologies"),
                _date_range(project.get("startDate"), project.get("endDate"), bool(project.get("isOngoing"))),
            ), size=9)
            w.line(project.get("description"))
            w.line(_join(project.get("projectUrl"), project.get("githubUrl")), size=9)
            w.gap(2)


def _render_sender(w: _Writer, basic: dict):
    w.line(basic.get("fullName"), style="B")
    for key in ("jobTitle", "department", "address", "email", "phone"):
        w.line(basic.get(key))
    w.gap()
    w.line(basic.get("date"))
    w.gap()


def _render_cover_letter(w: _Writer, data: dict):
    basic = _section(data.get("basic"))
    employer = _section(data.get("employer"))
    content = _section(data.get("content"))

    _render_sender(w, basic)
    w.line(employer.get("hiringManagerName"))
    w.line(employer.get("companyName"))
    w.line(employer.get("companyAddress"))
    w.gap()
    if content.get("subject"):
        w.line(f"Re: {content['subject']}", style="B")
    elif employer.get("jobTitle"):
        w.line(f"Re: {employer['jobTitle']}", style="B")
    w.gap()
    w.line(f"{content.get('salutation') or 'Dear Hiring Manager'},")
    for paragraph in ("introduction", "body", "conclusion"):
        if content.get(paragraph):
            w.gap(3)
            w.line(content[paragraph])
    w.gap()
    w.line(f"{content.get('closing') or 'Sincerely'},")
    w.line(basic.get("fullName"))


def _render_resignation_letter(w: _Writer, data: dict):
    basic = _section(data.get("basic"))
    company = _section(data.get("company"))
    resignation = _section(data.get("resignation"))

    _render_sender(w, basic)
    w.line(company.get("supervisorName"))
    w.line(company.get("supervisorTitle"))
    w.line(company.get("companyName"))
    w.line(company.get("companyAddress"))
    w.gap()
    w.line(f"Dear {company.get('supervisorName') or 'Manager'},")
    w.gap(3)

    position = basic.get("jobTitle") or "my position"
    notice = resignation.get("noticeWeeks") or "2"
    opening = f"Please accept this letter as formal notice of my resignation from {position}"
    if company.get("companyName"):
        opening += f" at {company['companyName']}"
    opening += f", with {notice} weeks' notice"
    if resignation.get("lastWorkingDate"):
        opening += f". My last working day will be {resignation['lastWorkingDate']}"
    w.line(opening + ".")
    for key in ("reason", "handoverNotes", "feedback"):
        if resignation.get(key):
            w.gap(3)
            w.line(resignation[key])
    w.gap()
    w.line("Sincerely,")
    w.line(basic.get("fullName"))


def _render_other_letter(w: _Writer, data: dict):
    basic = _section(data.get("basic"))
    recipient = _section(data.get("recipient"))
    content = _section(data.get("content"))

    _render_sender(w, basic)
    w.line(recipient.get("recipientName"))
    w.line(recipient.get("recipientTitle"))
    w.line(recipient.get("organizationName"))
    w.line(recipient.get("address"))
    w.gap()
    if content.get("subject"):
        w.line(f"Subject: {content['subject']}", style="B")
        w.gap()
    w.line(f"{content.get('salutation') or 'Dear Sir/Madam'},")
    w.gap(3)
    w.line(content.get("body"))
    w.gap()
    w.line(f"{content.get('closing') or 'Sincerely'},")
    w.line(basic.get("fullName"))


RENDERERS = {
    "resume": _render_resume,
    "cover-letter": _render_cover_letter,
    "resignation-letter": _render_resignation_letter,
    "other-letter": _render_other_letter,
}


def render_document_pdf(document: dict, generated_on: date | None = None) -> bytes:
    """Render a stored document record to PDF bytes.

    The header (title, generation date, document type) is always present.
    The body is laid out from the record's ``data`` according to its type;
    unknown fields are ignored and a non-dict payload yields a header-only PDF.
    """
    doc_type = str(document.get("type") or "")
    generated_on = generated_on or date.today()

    pdf = FPDF()
    pdf.set_margins(20, 20, 20)
    pdf.set_title(_latin1(document.get("title") or "Document"))
    pdf.add_page()
    w = _Writer(pdf)

    w.line(document.get("title") or "Untitled", size=20, style="B", height=10)
    pdf.set_text_color(80, 80, 80)
    w.line(f"Generated on: {generated_on.isoformat()}", size=10)
    w.line(f"Document Type: {TYPE_LABELS.get(doc_type, doc_type.replace('-', ' ').upper())}", size=10)
    pdf.set_text_color(0, 0, 0)

    pdf.ln(3)
    pdf.set_draw_color(200, 200, 200)
    pdf.line(20, pdf.get_y(), 190, pdf.get_y())
    pdf.ln(5)

    renderer = RENDERERS.get(doc_type)
    if renderer:
        renderer(w, _section(document.get("data")))

    return bytes(pdf.output())


def download_filename(title: Any) -> str:
    return f"{sanitize_filename(str(title or 'document'))}.pdf"


def content_disposition(title: Any) -> str:
    """Attachment header with an ASCII-safe ``filename``.

    When sanitizing changed the title, an RFC 5987 ``filename*`` carries the
    original UTF-8 name for clients that understand it.
    """
    filename = download_filename(title)
    header = f'attachment; filename="{filename}"'
    original = f"{title}.pdf" if title else filename
    if original != filename:
        header += f"; filename*=UTF-8''{quote(original, safe='')}"
    return header
