from io import BytesIO

from openpyxl import load_workbook

from tests.utils import API, auth_header, make_submission


def test_grades_excel(client, db, seed, teacher_token):
    make_submission(db, seed.assignment_id, seed.student_id, grade=85)
    make_submission(db, seed.assignment_id, seed.other_student_id, grade=75)

    r = client.post(f"{API}/export/grades/excel", json={}, headers=auth_header(teacher_token))
    assert r.status_code == 200, r.text
    assert r.headers["content-type"].startswith("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
    assert 'filename="seniku-grades-export-' in r.headers["content-disposition"]

    workbook = load_workbook(BytesIO(r.content))
    assert workbook.sheetnames == ["Summary", "Grades by Student", "Grades by Assignment"]
    summary = {row[0]: row[1] for row in workbook["Summary"].iter_rows(min_row=2, values_only=True)}
    assert summary["Total Submissions"] == 2
    assert summary["Average Score"] == 80
    grades = workbook["Grades by Student"]
    assert grades["A1"].value == "NIS"
    assert grades.max_row == 3


def test_grades_pdf(client, db, seed, teacher_token):
    make_submission(db, seed.assignment_id, seed.student_id, grade=85)

    r = client.post(f"{API}/export/grades/pdf", json={"format": "detailed"}, headers=auth_header(teacher_token))
    assert r.status_code == 200, r.text
    assert r.headers["content-type"] == "application/pdf"
    assert r.content.startswith(b"%PDF")


def test_export_without_data(client, seed, teacher_token):
    r = client.post(f"{API}/export/grades/excel", json={}, headers=auth_header(teacher_token))
    assert r.status_code == 404
    assert r.json()["error"] == "No data found for the specified filters"


def test_students_only_export_their_own_grades(client, db, seed, student_token):
    make_submission(db, seed.assignment_id, seed.other_student_id, grade=85)

    r = client.post(f"{API}/export/grades/pdf", json={}, headers=auth_header(student_token))
    assert r.status_code == 404


def test_report_card(client, db, seed, student_token):
    make_submission(db, seed.assignment_id, seed.student_id, grade=92)

    r = client.get(f"{API}/export/report-card/{seed.student_id}", headers=auth_header(student_token))
    assert r.status_code == 200, r.text
    assert r.content.startswith(b"%PDF")
    assert 'filename="report-card-siti-aminah-' in r.headers["content-disposition"]

    r = client.get(f"{API}/export/report-card/{seed.other_student_id}", headers=auth_header(student_token))
    assert r.status_code == 403
    assert r.json()["error"] == "Forbidden: You can only export your own report card"


def test_teacher_report_card_for_unknown_student(client, teacher_token):
    r = client.get(
        f"{API}/export/report-card/00000000-0000-0000-0000-000000000000?format=summary",
        headers=auth_header(teacher_token),
    )
    assert r.status_code == 404
    assert r.json()["error"] == "User not found"
