"""
Program cards: the truncated projection of a search record sent to the chat UI.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from baynav.smart.config import DESCRIPTION_MAX_CHARS, MAX_PROGRAM_CARDS


class ProgramCard(BaseModel):
    id: str
    name: str
    category: Optional[str] = None
    description: str = ""
    phone: Optional[str] = None
    website: Optional[str] = None
    areas: List[str] = Field(default_factory=list)


def truncate_description(description: Optional[str], max_chars: int = DESCRIPTION_MAX_CHARS) -> str:
    """Cut to max_chars and append '...' when anything was removed."""
    if not description:
        return ""
    if len(description) <= max_chars:
        return description
    return description[:max_chars] + "..."


def format_program_card(record: Dict[str, Any]) -> ProgramCard:
    areas = record.get("areas") or []
    if isinstance(areas, str):
        areas = [areas]
    return ProgramCard(
        id=str(record.get("id") or ""),
        name=record.get("name") or "",
        category=record.get("category"),
        description=truncate_description(record.get("description")),
        phone=record.get("phone") or None,
        website=record.get("website") or None,
        areas=[str(a) for a in areas],
    )


def format_program_cards(records: List[Dict[str, Any]], limit: int = MAX_PROGRAM_CARDS) -> List[ProgramCard]:
    """First `limit` records as cards, in index ranking order."""
    return [format_program_card(record) for record in records[:limit]]
