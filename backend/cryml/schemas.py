from pydantic import BaseModel
from typing import Optional, Dict, Any, List


class ValidateRequest(BaseModel):
    content: str  # cryml YAML text
    strict: bool = False  # warnings invalidate too


class ParseRequest(BaseModel):
    content: str


class PrismaParseRequest(BaseModel):
    """Request to parse a .prisma schema into the ERD model"""
    content: str
    name: str = "Prisma Schema"


class LayoutRequest(BaseModel):
    content: str
    columns: int = 4  # grid engine columns
    spacing: float = 400


class IssueResponse(BaseModel):
    level: str
    code: str
    message: str
    path: str = ""
    suggestion: Optional[str] = None


class ValidateResponse(BaseModel):
    status: str  # success | invalid
    summary: str
    is_valid: bool
    diagram_kind: Optional[str] = None
    error_count: int
    warning_count: int
    errors: List[IssueResponse] = []
    warnings: List[IssueResponse] = []


class ParseResponse(BaseModel):
    status: str
    diagram_kind: str
    diagram: Dict[str, Any]
    warnings: List[IssueResponse] = []


class LayoutResponse(BaseModel):
    status: str
    diagram_kind: str
    graph: Dict[str, Any]
