"""API schemas for the notification endpoint."""
from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class NotificationContent(BaseModel):
    """Per-language headings and bodies, e.g. ``{"en": "..."}``."""

    titles: Optional[Dict[str, str]] = None
    messages: Optional[Dict[str, str]] = None


class NotifyRequest(BaseModel):
    id_token: Optional[str] = Field(default=None, alias="idToken")
    user_uids: Optional[List[str]] = Field(default=None, alias="userUids")
    checklist_id: Optional[Union[str, int]] = Field(default=None, alias="checklistId")
    content: Optional[NotificationContent] = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def checklist_key(self) -> Optional[str]:
        if self.checklist_id is None or self.checklist_id == "":
            return None
        return str(self.checklist_id)
