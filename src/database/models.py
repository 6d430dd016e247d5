import re
from datetime import datetime
from typing import Optional

from sqlalchemy import Integer, String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from src.database.core import Base

SHEET_ID_PATTERN = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")


##################################
# Teacher Accounts
##################################
class Teacher(Base):
    __tablename__ = "teachers"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False) # bcrypt, never the raw password
    sheet_url: Mapped[Optional[str]] = mapped_column(String) # Informational, the web app owns the sheet
    webapp_url: Mapped[str] = mapped_column(String, nullable=False) # Apps Script web app endpoint
    webapp_secret: Mapped[str] = mapped_column(String, nullable=False) # Shared secret sent with every payload
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.CURRENT_TIMESTAMP(), nullable=False)

    @property
    def sheet_id(self) -> Optional[str]:
        return extract_sheet_id(self.sheet_url)

    def __repr__(self) -> str:
        # Keep secrets out of logs
        return f"Teacher(id={self.id!r}, username={self.username!r})"


def extract_sheet_id(url: Optional[str]) -> Optional[str]:
    """Pull the spreadsheet id out of a Google Sheets URL, None if there isn't one"""
    if not url:
        return None
    match = SHEET_ID_PATTERN.search(url)
    return match.group(1) if match else None
