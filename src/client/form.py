from datetime import date as date_type
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel

from src.config import PRESENT_MATRIX_SIZE

# value -> label shown to teachers
SUBJECTS = {
    "cn": "CN",
    "os": "OS",
    "bc": "Block Chain",
}
ROLLS = range(1, PRESENT_MATRIX_SIZE + 1)


class LectureType(str, Enum):
    REGULAR = "regular"
    EXTRA = "extra"


class Message(BaseModel):
    """Feedback for the teacher after an action"""
    type: Literal["success", "error", "info"]
    text: str


class AttendanceForm:
    """
    Local state of one attendance sheet: subject, lecture type, date and the 100-roll grid.

    Lecture type is a single value so "regular" and "extra" can never both be set;
    `None` means both boxes were cleared.
    """

    def __init__(
        self,
        subject: str = "cn",
        lecture_type: Optional[LectureType] = LectureType.REGULAR,
        date: Optional[str] = None,
    ):
        self.subject = subject
        self.lecture_type = lecture_type
        self.date = date or date_type.today().isoformat()
        self.present: Dict[int, bool] = {roll: False for roll in ROLLS}

    def toggle(self, roll: int) -> bool:
        if roll not in self.present:
            raise ValueError(f"Roll number must be between 1 and {PRESENT_MATRIX_SIZE}, got {roll}")
        self.present[roll] = not self.present[roll]
        return self.present[roll]

    def set_regular(self, checked: bool) -> None:
        # Checking one box clears the other, last change wins
        if checked:
            self.lecture_type = LectureType.REGULAR
        elif self.lecture_type is LectureType.REGULAR:
            self.lecture_type = None

    def set_extra(self, checked: bool) -> None:
        if checked:
            self.lecture_type = LectureType.EXTRA
        elif self.lecture_type is LectureType.EXTRA:
            self.lecture_type = None

    def clear_all(self) -> Message:
        self.present = {roll: False for roll in ROLLS}
        return Message(type="info", text="Cleared selections.")

    def invert_all(self) -> Message:
        self.present = {roll: not value for roll, value in self.present.items()}
        return Message(type="info", text="Inverted selections.")

    @property
    def present_count(self) -> int:
        return sum(1 for value in self.present.values() if value)

    def build_present_matrix(self) -> List[str]:
        return ["1" if self.present[roll] else "0" for roll in ROLLS]

    def to_payload(self) -> Dict[str, Any]:
        """Body for POST /api/attendance"""
        return {
            "subject": self.subject,
            "date": self.date,
            "regular": 1 if self.lecture_type is LectureType.REGULAR else 0,
            "extra": 1 if self.lecture_type is LectureType.EXTRA else 0,
            "presentMatrix": self.build_present_matrix(),
        }
