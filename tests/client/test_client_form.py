from datetime import date

import pytest

from src.client.form import AttendanceForm, LectureType


class TestAttendanceForm:
    def test_defaults(self):
        form = AttendanceForm()
        assert form.subject == "cn"
        assert form.lecture_type is LectureType.REGULAR
        assert form.date == date.today().isoformat()
        assert sorted(form.present) == list(range(1, 101))
        assert form.present_count == 0

    def test_toggle(self):
        form = AttendanceForm()
        assert form.toggle(5) is True
        assert form.toggle(5) is False
        form.toggle(100)
        assert form.present_count == 1

    @pytest.mark.parametrize("roll", [0, 101, -1])
    def test_toggle_out_of_range(self, roll):
        with pytest.raises(ValueError):
            AttendanceForm().toggle(roll)

    def test_lecture_type_last_change_wins(self):
        form = AttendanceForm()
        form.set_extra(True)
        assert form.lecture_type is LectureType.EXTRA
        form.set_regular(True)
        assert form.lecture_type is LectureType.REGULAR

    def test_lecture_type_can_be_cleared(self):
        """ Test unchecking the selected box leaves neither selected """
        form = AttendanceForm()
        form.set_regular(False)
        assert form.lecture_type is None
        assert form.to_payload()["regular"] == 0
        assert form.to_payload()["extra"] == 0

    def test_unchecking_other_box_keeps_selection(self):
        form = AttendanceForm()
        form.set_extra(False)
        assert form.lecture_type is LectureType.REGULAR

    def test_clear_all(self):
        form = AttendanceForm()
        for roll in (1, 50, 99):
            form.toggle(roll)
        message = form.clear_all()
        assert message.type == "info"
        assert not any(form.present.values())
        # Clearing an already clear grid changes nothing
        form.clear_all()
        assert form.present_count == 0

    def test_invert_all_twice_is_identity(self):
        form = AttendanceForm()
        for roll in (2, 3, 77):
            form.toggle(roll)
        before = dict(form.present)

        message = form.invert_all()
        assert message.type == "info"
        assert form.present_count == 97
        assert form.present[2] is False and form.present[1] is True

        form.invert_all()
        assert form.present == before

    def test_build_present_matrix(self):
        form = AttendanceForm()
        for roll in (1, 2, 3):
            form.toggle(roll)
        matrix = form.build_present_matrix()
        assert matrix == ["1", "1", "1"] + ["0"] * 97

    def test_to_payload(self):
        form = AttendanceForm(subject="bc", lecture_type=LectureType.EXTRA, date="2024-01-01")
        form.toggle(10)
        payload = form.to_payload()
        assert payload["subject"] == "bc"
        assert payload["date"] == "2024-01-01"
        assert payload["regular"] == 0
        assert payload["extra"] == 1
        assert payload["presentMatrix"][9] == "1"
        assert len(payload["presentMatrix"]) == 100
