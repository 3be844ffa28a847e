"""
Day-to-day records: attendance, scores, donations and violations.
"""

import pytest
from datetime import date
from decimal import Decimal

from school_backend.api.exceptions import BadRequestException, NotFoundException, UnauthorizedException
from school_backend.interface.attendance import AttendanceSubmit, StudentAttendanceInput
from school_backend.interface.finance import DonationCreate, DonationItemInput, DonationUpdate
from school_backend.interface.grades import AssessmentCreate, AssessmentUpdate, ScoreInput
from school_backend.interface.violations import (
    StudentViolationCreate,
    ViolationCategoryCreate,
    ViolationTypeCreate,
    ViolationTypeUpdate
)
from school_backend.model.academic import Schedule
from school_backend.model.attendance import AttendanceDetail, AttendanceSession
from school_backend.model.finance import DonationItem, Donor
from school_backend.services.attendance import AttendanceService, summarize
from school_backend.services.finance import FinanceService
from school_backend.services.grades import GradeService
from school_backend.services.violations import ViolationService

LESSON_DAY = date(2025, 7, 14)


@pytest.fixture
def schedule(db, school):
    schedule = Schedule(teaching_assignment=school["assignment"], day_of_week=1, start_time="07:00", end_time="08:30")
    db.add(schedule)
    db.commit()
    return schedule


def attendance(schedule, entries, topic=None) -> AttendanceSubmit:
    return AttendanceSubmit(
        schedule_id=schedule.id,
        date=LESSON_DAY,
        topic=topic,
        students=[StudentAttendanceInput(student_id=student.id, status=status) for student, status in entries]
    )


class TestAttendance:

    def test_submit_and_summary(self, db, school, schedule):
        ahmad, siti = school["students"]
        session = AttendanceService(db).submit(attendance(schedule, [(ahmad, "PRESENT"), (siti, "SICK")], "Aljabar"))

        assert session.id is not None
        assert session.topic == "Aljabar"
        assert session.summary == {"PRESENT": 1, "SICK": 1, "PERMISSION": 0, "ABSENT": 0}

    def test_resubmit_replaces_session(self, db, school, schedule):
        ahmad, siti = school["students"]
        service = AttendanceService(db)
        first = service.submit(attendance(schedule, [(ahmad, "PRESENT"), (siti, "PRESENT")], "Aljabar"))
        second = service.submit(attendance(schedule, [(ahmad, "ABSENT")], "Geometri"))

        assert second.id == first.id
        assert second.topic == "Geometri"
        assert [(d.student_id, d.status) for d in second.details] == [(ahmad.id, "ABSENT")]
        assert db.query(AttendanceSession).count() == 1
        assert db.query(AttendanceDetail).count() == 1

    def test_duplicate_student(self, db, school, schedule):
        ahmad = school["students"][0]
        with pytest.raises(BadRequestException) as e:
            AttendanceService(db).submit(attendance(schedule, [(ahmad, "PRESENT"), (ahmad, "SICK")]))
        assert e.value.detail == "duplicate student_id"
        assert db.query(AttendanceSession).count() == 0

    def test_unknown_schedule(self, db):
        payload = AttendanceSubmit(
            schedule_id="missing",
            date=LESSON_DAY,
            students=[StudentAttendanceInput(student_id="x", status="PRESENT")]
        )
        with pytest.raises(NotFoundException):
            AttendanceService(db).submit(payload)

    def test_unsaved_sheet_lists_classroom(self, db, school, schedule):
        sheet = AttendanceService(db).session_or_class_list(schedule.id, LESSON_DAY)
        assert sheet.id is None
        assert [d.student_name for d in sheet.details] == ["Ahmad Fauzi", "Siti Aminah"]
        assert all(d.status is None for d in sheet.details)

    def test_history_and_delete(self, db, school, schedule):
        service = AttendanceService(db)
        session = service.submit(attendance(schedule, [(school["students"][0], "PRESENT")]))

        history = service.history(teaching_assignment_id=school["assignment"].id)
        assert [item.id for item in history] == [session.id]

        service.delete(session.id)
        assert service.history(teaching_assignment_id=school["assignment"].id) == []

    def test_summarize_counts_every_status(self):
        assert summarize(["ABSENT", "ABSENT"]) == {"PRESENT": 0, "SICK": 0, "PERMISSION": 0, "ABSENT": 2}


class TestGrades:

    @pytest.fixture
    def assessment(self, db, school):
        return GradeService(db).create_assessment(AssessmentCreate(
            teaching_assignment_id=school["assignment"].id,
            title="Ulangan Harian 1",
            type="QUIZ",
            date=LESSON_DAY
        ))

    def test_default_max_score(self, assessment):
        assert assessment.max_score == 100

    def test_scores_are_upserted(self, db, school, assessment):
        ahmad, siti = school["students"]
        service = GradeService(db)
        service.submit_scores(assessment.id, [ScoreInput(student_id=ahmad.id, score=70)])
        result = service.submit_scores(assessment.id, [
            ScoreInput(student_id=ahmad.id, score=85, feedback="better"),
            ScoreInput(student_id=siti.id, score=90)
        ])

        scores = {score.student_id: (score.score, score.feedback) for score in result.scores}
        assert scores == {ahmad.id: (85, "better"), siti.id: (90, None)}

    def test_score_above_max(self, db, school, assessment):
        with pytest.raises(BadRequestException) as e:
            GradeService(db).submit_scores(assessment.id, [ScoreInput(student_id=school["students"][0].id, score=101)])
        assert e.value.detail == "score must be between 0 and 100"

    def test_lowering_max_below_existing_scores(self, db, school, assessment):
        service = GradeService(db)
        service.submit_scores(assessment.id, [ScoreInput(student_id=school["students"][0].id, score=80)])
        with pytest.raises(BadRequestException):
            service.update_assessment(assessment.id, AssessmentUpdate(max_score=50))

    def test_unknown_assignment(self, db):
        with pytest.raises(NotFoundException):
            GradeService(db).create_assessment(AssessmentCreate(
                teaching_assignment_id="missing",
                title="UTS",
                type="MID_EXAM",
                date=LESSON_DAY
            ))


class TestDonations:

    @pytest.fixture
    def treasurer(self, db, school, make_user):
        user = make_user("bendahara")
        school["teacher"].user_id = user.id
        db.commit()
        return user

    def donation(self, **overrides) -> DonationCreate:
        data = {
            "donor_name": "Hamba Allah",
            "donor_phone": "0812000001",
            "type": "MONEY",
            "payment_method": "CASH",
            "total_amount": Decimal("500000")
        }
        data.update(overrides)
        return DonationCreate(**data)

    def test_requires_employee_record(self, db, make_user):
        user = make_user("tamu")
        with pytest.raises(UnauthorizedException) as e:
            FinanceService(db).create_donation(user.id, self.donation())
        assert e.value.detail == "user is not associated with an employee record"

    def test_returning_donor_is_reused(self, db, school, treasurer):
        service = FinanceService(db)
        first = service.create_donation(treasurer.id, self.donation())
        second = service.create_donation(treasurer.id, self.donation(total_amount=Decimal("250000")))
        by_name = service.create_donation(treasurer.id, self.donation(donor_phone=None))

        assert first.donor_id == second.donor_id == by_name.donor_id
        assert first.employee_id == school["teacher"].id
        assert db.query(Donor).count() == 1

    def test_new_donor(self, db, treasurer):
        service = FinanceService(db)
        service.create_donation(treasurer.id, self.donation())
        service.create_donation(treasurer.id, self.donation(donor_name="Keluarga Wijaya", donor_phone=None))
        assert db.query(Donor).count() == 2

    def test_goods_items_replaced_on_update(self, db, treasurer):
        service = FinanceService(db)
        donation = service.create_donation(treasurer.id, self.donation(
            type="GOODS",
            payment_method="GOODS",
            total_amount=Decimal("0"),
            items=[DonationItemInput(item_name="Beras", quantity=Decimal("10"), unit="kg")]
        ))
        assert [item.item_name for item in donation.items] == ["Beras"]

        donation = service.update_donation(donation.id, DonationUpdate(items=[
            DonationItemInput(item_name="Buku tulis", quantity=Decimal("50"), unit="pcs")
        ]))
        assert [item.item_name for item in donation.items] == ["Buku tulis"]
        assert db.query(DonationItem).count() == 1


class TestViolations:

    @pytest.fixture
    def late(self, db):
        service = ViolationService(db)
        category = service.create_category(ViolationCategoryCreate(name="Kedisiplinan"))
        return service.create_type(ViolationTypeCreate(category_id=category.id, name="Terlambat", default_points=5))

    def record(self, student, violation_type) -> StudentViolationCreate:
        return StudentViolationCreate(student_id=student.id, violation_type_id=violation_type.id, violation_date=LESSON_DAY)

    def test_points_are_snapshotted(self, db, school, late):
        service = ViolationService(db)
        ahmad = school["students"][0]
        first = service.record(self.record(ahmad, late))

        service.update_type(late.id, ViolationTypeUpdate(default_points=10))
        second = service.record(self.record(ahmad, late))

        assert (first.points, second.points) == (5, 10)
        assert service.total_points(ahmad.id) == 15
        assert len(service.list_records(student_id=ahmad.id)) == 2

    def test_type_requires_category(self, db):
        with pytest.raises(NotFoundException) as e:
            ViolationService(db).create_type(ViolationTypeCreate(category_id="missing", name="Bolos"))
        assert e.value.detail == "category not found"

    def test_unknown_student(self, db, late):
        with pytest.raises(NotFoundException):
            ViolationService(db).total_points("missing")
