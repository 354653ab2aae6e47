from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    username: str
    display_name: str


class Sprint(BaseModel):
    number: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class Message(BaseModel):
    """A chat message. id 0/None means not yet persisted; the store generates it on insert."""
    id: Optional[int] = 0
    content: str
    timestamp: Optional[datetime] = None
    sender_username: str
    sprint_number: int


class TrelloLink(BaseModel):
    """
    Trello 看板链接。id 可以由调用方显式指定，也可以留空由数据库生成；
    message_id 为 0 表示未关联消息。
    """
    id: Optional[int] = 0
    message_id: Optional[int] = 0
    url: str


class Task(BaseModel):
    message_id: int
    trello_id: int
    description: Optional[str] = ""
