# File: application/src/seniku/controllers/export_controller.py

import io
import logging
import re
from typing import List
from uuid import UUID

import pandas as pd
from openpyxl.styles import Font, PatternFill
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..models.assignment import Assignment
from ..models.submission import Submission, SubmissionStatus
from ..models.user import TeacherClass, User, UserRole
from ..schemas.export import ExportFilters, GradeRow
from ..utils.errors import ForbiddenError, NotFoundError
from ..utils.pdf import PdfWriter, truncate
from ..utils.time import format_local_date, get_current_time, to_naive_utc, today_stamp

logger = logging.getLogger(__name__)

GRADE_COLUMNS = [
    "NIS", "Nama", "Kelas", "Assignment", "Category", "Grade",
    "Status", "Feedback", "Submitted Date", "Graded Date",
]
HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")


def grades_excel_filename() -> str:
    return f"seniku-grades-export-{today_stamp()}.xlsx"


def grades_pdf_filename() -> str:
    return f"seniku-grades-report-{today_stamp()}.pdf"


def report_card_filename(student: User) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (student.name or "student").lower()).strip("-")
    return f"report-card-{slug or 'student'}-{today_stamp()}.pdf"


# ─── Data selection ────────────────────────────────────────────
def _scope_conditions(user: User) -> list:
    if user.role == UserRole.STUDENT:
        return [Submission.student_id == user.id]
    if user.role == UserRole.TEACHER:
        class_ids = select(TeacherClass.class_id).where(TeacherClass.teacher_id == user.id)
        return [
            Submission.student_id.in_(select(User.id).where(User.class_id.in_(class_ids))),
            Submission.assignment_id.in_(select(Assignment.id).where(Assignment.created_by == user.id)),
        ]
    return []


def _to_row(submission: Submission) -> GradeRow:
    student = submission.student
    assignment = submission.assignment
    return GradeRow(
        submission_id=submission.id,
        student_id=submission.student_id,
        student_name=student.name if student else "-",
        nis=student.nis if student else None,
        class_name=student.class_name if student else None,
        assignment_id=submission.assignment_id,
        assignment_title=assignment.title if assignment else "-",
        category_name=assignment.category.name if assignment and assignment.category else None,
        grade=submission.grade,
        status=submission.status.value,
        feedback=submission.feedback,
        submitted_at=submission.submitted_at,
        graded_at=submission.graded_at,
    )


def get_grades_rows(db: Session, user: User, filters: ExportFilters) -> List[GradeRow]:
    conditions = [Submission.status == SubmissionStatus.GRADED, Submission.grade != None]
    conditions.extend(_scope_conditions(user))

    if filters.class_ids:
        conditions.append(Submission.student_id.in_(select(User.id).where(User.class_id.in_(filters.class_ids))))
    if filters.student_ids:
        conditions.append(Submission.student_id.in_(filters.student_ids))
    if filters.assignment_ids:
        conditions.append(Submission.assignment_id.in_(filters.assignment_ids))
    if filters.start_date:
        conditions.append(Submission.submitted_at >= to_naive_utc(filters.start_date))
    if filters.end_date:
        conditions.append(Submission.submitted_at <= to_naive_utc(filters.end_date))

    submissions = db.exec(
        select(Submission)
        .where(*conditions)
        .options(
            selectinload(Submission.student).selectinload(User.school_class),
            selectinload(Submission.assignment).selectinload(Assignment.category),
        )
        .order_by(Submission.submitted_at.desc())
    ).all()
    if not submissions:
        raise NotFoundError("No data found for the specified filters")
    return [_to_row(s) for s in submissions]


# ─── Excel ─────────────────────────────────────────────────────
def _grade_frame(rows: List[GradeRow]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            [
                r.nis or "-",
                r.student_name,
                r.class_name or "-",
                r.assignment_title,
                r.category_name or "-",
                r.grade,
                r.status,
                r.feedback or "-",
                format_local_date(r.submitted_at),
                format_local_date(r.graded_at),
            ]
            for r in rows
        ],
        columns=GRADE_COLUMNS,
    )


def _summary_frame(rows: List[GradeRow]) -> pd.DataFrame:
    grades = pd.Series([r.grade for r in rows], dtype="float")
    summary = [
        ("Total Students", len({r.student_id for r in rows})),
        ("Total Assignments", len({r.assignment_id for r in rows})),
        ("Total Submissions", len(rows)),
        ("Graded Submissions", int(grades.count())),
        ("Average Score", round(float(grades.mean()), 2) if len(grades) else 0),
        ("Highest Score", int(grades.max()) if len(grades) else 0),
        ("Lowest Score", int(grades.min()) if len(grades) else 0),
        ("Export Date", format_local_date(get_current_time(), "%Y-%m-%d %H:%M")),
    ]
    return pd.DataFrame(summary, columns=["Metric", "Value"])


def _style_sheet(worksheet) -> None:
    for cell in worksheet[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
    for column in worksheet.columns:
        width = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
        worksheet.column_dimensions[column[0].column_letter].width = min(width + 2, 50)


def build_grades_excel(rows: List[GradeRow]) -> bytes:
    by_student = _grade_frame(sorted(rows, key=lambda r: (r.class_name or "", r.student_name)))
    by_assignment = _grade_frame(sorted(rows, key=lambda r: (r.assignment_title, r.student_name)))

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        _summary_frame(rows).to_excel(writer, sheet_name="Summary", index=False)
        by_student.to_excel(writer, sheet_name="Grades by Student", index=False)
        by_assignment.to_excel(writer, sheet_name="Grades by Assignment", index=False)

        writer.book.properties.creator = "SeniKu App"
        for worksheet in writer.book.worksheets:
            _style_sheet(worksheet)

    logger.info(f"Built grades workbook with {len(rows)} row(s)")
    return buffer.getvalue()


# ─── PDF ───────────────────────────────────────────────────────
def _stat_lines(grades: List[int]) -> List[str]:
    if not grades:
        return ["Average Score: 0.00", "Highest Score: 0", "Lowest Score: 0"]
    return [
        f"Average Score: {sum(grades) / len(grades):.2f}",
        f"Highest Score: {max(grades)}",
        f"Lowest Score: {min(grades)}",
    ]


def build_grades_pdf(rows: List[GradeRow], format: str = "summary") -> bytes:
    pdf = PdfWriter()
    pdf.text("SeniKu - Grades Report", size=20, bold=True, center=True)
    pdf.text(f"Generated: {format_local_date(get_current_time(), '%Y-%m-%d %H:%M')}", size=10, center=True)
    pdf.space(15)

    pdf.text("Summary", size=14, bold=True)
    pdf.text(f"Total Students: {len({r.student_id for r in rows})}")
    pdf.text(f"Total Assignments: {len({r.assignment_id for r in rows})}")
    pdf.text(f"Total Submissions: {len(rows)}")
    for line in _stat_lines([r.grade for r in rows]):
        pdf.text(line)

    if format == "detailed":
        pdf.space(15)
        pdf.text("Grades", size=14, bold=True)
        pdf.table(
            ["NIS", "Nama", "Kelas", "Assignment", "Grade", "Submitted"],
            [
                [
                    r.nis or "-",
                    truncate(r.student_name, 15),
                    r.class_name or "-",
                    truncate(r.assignment_title, 20),
                    str(r.grade),
                    format_local_date(r.submitted_at),
                ]
                for r in rows
            ],
            widths=[65, 100, 50, 130, 45, 105],
        )

    logger.info(f"Built {format} grades report with {len(rows)} row(s)")
    return pdf.to_bytes()


def get_report_card_student(db: Session, student_id: UUID, user: User) -> User:
    if user.role == UserRole.STUDENT and user.id != student_id:
        raise ForbiddenError("Forbidden: You can only export your own report card")
    student = db.exec(
        select(User).where(User.id == student_id).options(selectinload(User.school_class))
    ).first()
    if not student:
        raise NotFoundError("User not found")
    return student


def build_report_card_pdf(db: Session, student: User, format: str = "detailed") -> bytes:
    submissions = db.exec(
        select(Submission)
        .where(Submission.student_id == student.id, Submission.status == SubmissionStatus.GRADED)
        .options(selectinload(Submission.assignment).selectinload(Assignment.category))
        .order_by(Submission.submitted_at.desc())
    ).all()
    grades = [s.grade for s in submissions if s.grade is not None]

    pdf = PdfWriter()
    pdf.text("Report Card", size=20, bold=True, center=True)
    pdf.space(10)
    pdf.text(f"Name: {student.name}")
    pdf.text(f"NIS: {student.nis or '-'}")
    pdf.text(f"Class: {student.class_name or '-'}")
    pdf.text(f"Generated: {format_local_date(get_current_time(), '%Y-%m-%d %H:%M')}", size=10)
    pdf.space(15)

    pdf.text("Summary Statistics", size=14, bold=True)
    pdf.text(f"Total Assignments: {len(submissions)}")
    pdf.text(f"Completed Assignments: {len(grades)}")
    pdf.text(_stat_lines(grades)[0])
    pdf.text(_stat_lines(grades)[1])

    if format == "detailed" and submissions:
        pdf.space(15)
        pdf.text("Assignments", size=14, bold=True)
        for submission in submissions:
            assignment = submission.assignment
            category = assignment.category.name if assignment and assignment.category else "-"
            pdf.space(5)
            pdf.text(assignment.title if assignment else submission.title, bold=True)
            pdf.text(f"Category: {category}", size=10)
            pdf.text(f"Grade: {submission.grade}", size=10)
            pdf.text(f"Feedback: {truncate(submission.feedback, 90)}", size=10)
            pdf.text(f"Submitted: {format_local_date(submission.submitted_at)}", size=10)

    logger.info(f"Built report card for {student.id} with {len(submissions)} graded work(s)")
    return pdf.to_bytes()
