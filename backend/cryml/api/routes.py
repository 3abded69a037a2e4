from fastapi import APIRouter, HTTPException

from cryml import config
from cryml.api.serializers import serialize_ir
from cryml.compiler.graph_builder import build_layout_graph
from cryml.compiler.layout import GridLayoutEngine, apply_layout
from cryml.ir.errors import DiagramParseError
from cryml.parsers.diagram_parser import diagram_kind_of, parse_diagram
from cryml.parsers.prisma_parser import parse_prisma_schema
from cryml.schemas import (
    LayoutRequest,
    LayoutResponse,
    ParseRequest,
    ParseResponse,
    PrismaParseRequest,
    ValidateRequest,
    ValidateResponse,
)
from cryml.validation.diagram_validator import DiagramValidator, validate_diagram

router = APIRouter()


def _parse_or_400(content: str):
    try:
        return parse_diagram(content)
    except DiagramParseError as e:
        if config.DEBUG:
            print(f"[Routes] Parse failed at {e.path or '<root>'}: {e.message}")
        raise HTTPException(status_code=400, detail={"message": e.message, "path": e.path})


# ============================================================
# VALIDATION
# ============================================================

@router.post("/validate", response_model=ValidateResponse)
def validate(request: ValidateRequest):
    """Run all validation phases over a cryml document."""
    result = DiagramValidator(strict_mode=request.strict).validate(request.content)
    return {
        "status": "success" if result.is_valid else "invalid",
        "summary": result.get_summary(),
        **result.to_dict(),
    }


# ============================================================
# PARSING
# ============================================================

@router.post("/parse", response_model=ParseResponse)
def parse(request: ParseRequest):
    """
    Parse a cryml document into its canonical model.

    Documents that parse but carry validation errors are rejected with 422
    and the full validation result; warnings ride along with the model.
    """
    diagram = _parse_or_400(request.content)

    result = validate_diagram(request.content)
    if result.errors:
        raise HTTPException(status_code=422, detail=result.to_dict())

    return {
        "status": "success",
        "diagram_kind": diagram_kind_of(diagram).value,
        "diagram": serialize_ir(diagram),
        "warnings": [w.to_dict() for w in result.warnings],
    }


@router.post("/parse/prisma", response_model=ParseResponse)
def parse_prisma(request: PrismaParseRequest):
    """Parse a .prisma schema into the canonical ERD model."""
    try:
        diagram = parse_prisma_schema(request.content, name=request.name)
    except DiagramParseError as e:
        raise HTTPException(status_code=400, detail={"message": e.message, "path": e.path})

    return {
        "status": "success",
        "diagram_kind": "erd",
        "diagram": serialize_ir(diagram),
    }


# ============================================================
# LAYOUT
# ============================================================

@router.post("/layout", response_model=LayoutResponse)
def layout(request: LayoutRequest):
    """Build the layout request graph and place it with the grid engine."""
    diagram = _parse_or_400(request.content)

    graph = build_layout_graph(diagram)
    engine = GridLayoutEngine(columns=max(1, request.columns), spacing=request.spacing)
    apply_layout(graph, engine)

    return {
        "status": "success",
        "diagram_kind": graph.diagram_kind,
        "graph": serialize_ir(graph),
    }


@router.get("/health")
def health():
    return {"status": "ok"}
