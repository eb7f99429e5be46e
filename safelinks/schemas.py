from datetime import datetime

from pydantic import BaseModel


class ShortenIn(BaseModel):
    originalUrl: str


class ShortenOut(BaseModel):
    originalUrl: str
    code: str
    shortUrl: str
    existing: bool


class ReportIn(BaseModel):
    code: str
    reason: str


class LinkInfo(BaseModel):
    code: str
    originalUrl: str
    shortUrl: str
    createdAt: datetime | None = None
    reported: bool


class LinkCount(BaseModel):
    count: int


class QrOut(BaseModel):
    qr_base64: str


class MessageOut(BaseModel):
    message: str


class ErrorOut(BaseModel):
    error: str
    reason: str | None = None
