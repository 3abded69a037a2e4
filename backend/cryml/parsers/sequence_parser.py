from typing import Any, Dict, List

from cryml import config
from cryml.dialect import as_text, iter_entries
from cryml.ir.diagram import DiagramKind
from cryml.ir.errors import DiagramParseError
from cryml.ir.sequence_ir import Block, Message, Note, Participant, SequenceDiagram
from cryml.parsers.yaml_loader import (
    expect_kind,
    load_document,
    optional_text,
    parse_metadata,
    require_section,
    to_number,
)
from cryml.visual.visual_style import SEQUENCE_COLORS, color_to_hex


def _mapping_entry(entry, what: str) -> Dict[str, Any]:
    if not isinstance(entry.raw, dict):
        raise DiagramParseError(f"{what} must be a mapping", entry.path)
    return entry.raw


def _id_or_default(entry, prefix: str, index: int) -> str:
    if entry.id is None or entry.id == "":
        return f"{prefix}-{index}"
    return as_text(entry.id)


def parse_participants(raw_participants: Any) -> List[Participant]:
    participants = []
    for i, entry in enumerate(iter_entries(raw_participants, "participants")):
        raw = _mapping_entry(entry, "Participant")
        participant_id = _id_or_default(entry, "participant", i)
        order = raw.get("order")
        participants.append(Participant(
            id=participant_id,
            type=as_text(raw.get("type")) or "participant",
            label=optional_text(raw.get("label")) or participant_id,
            description=optional_text(raw.get("description")),
            order=to_number(order, f"{entry.path}.order") if order is not None else None,
            group=optional_text(raw.get("group")),
            color=color_to_hex(raw["color"], SEQUENCE_COLORS) if raw.get("color") else None,
        ))
    return participants


def parse_messages(raw_messages: Any) -> List[Message]:
    messages = []
    for i, entry in enumerate(iter_entries(raw_messages, "messages")):
        raw = _mapping_entry(entry, "Message")
        if raw.get("from") is None or raw.get("to") is None:
            raise DiagramParseError("Message must have from and to", entry.path)

        messages.append(Message(
            id=_id_or_default(entry, "message", i),
            source=as_text(raw["from"]),
            target=as_text(raw["to"]),
            label=as_text(raw.get("label")) or "",
            type=as_text(raw.get("type")) or "sync",
            sequence_order=to_number(raw.get("sequence_order"), f"{entry.path}.sequence_order"),
            arrow_type=as_text(raw.get("arrow_type")) or "solid",
            return_message=optional_text(raw.get("return_message")),
            note=optional_text(raw.get("note")),
        ))
    return messages


def parse_blocks(raw_blocks: Any) -> List[Block]:
    blocks = []
    for i, entry in enumerate(iter_entries(raw_blocks, "blocks")):
        raw = _mapping_entry(entry, "Block")
        message_ids = raw.get("messages") if isinstance(raw.get("messages"), list) else []
        blocks.append(Block(
            id=_id_or_default(entry, "block", i),
            type=as_text(raw.get("type")) or "rect",
            condition=optional_text(raw.get("condition")),
            messages=[as_text(m) for m in message_ids if m is not None],
            parent_block=optional_text(raw.get("parent_block")),
            label=optional_text(raw.get("label")),
        ))
    return blocks


def parse_notes(raw_notes: Any) -> List[Note]:
    notes = []
    for i, entry in enumerate(iter_entries(raw_notes, "notes")):
        raw = _mapping_entry(entry, "Note")
        attached = raw.get("attached_to")
        if attached is None:
            attached = []
        elif not isinstance(attached, list):
            attached = [attached]
        notes.append(Note(
            id=_id_or_default(entry, "note", i),
            text=as_text(raw.get("text")) or "",
            attached_to=[as_text(a) for a in attached if a is not None],
            position=optional_text(raw.get("position")),
        ))
    return notes


def build_sequence(doc: Dict[str, Any]) -> SequenceDiagram:
    """Build a ``SequenceDiagram`` from an already-loaded document."""
    expect_kind(doc, DiagramKind.SEQUENCE)
    metadata = parse_metadata(doc)

    participants = parse_participants(require_section(doc, "participants"))
    messages = parse_messages(doc.get("messages"))
    style = doc.get("style") if isinstance(doc.get("style"), dict) else {}

    diagram = SequenceDiagram(
        metadata=metadata,
        participants=participants,
        messages=messages,
        blocks=parse_blocks(doc.get("blocks")),
        notes=parse_notes(doc.get("notes")),
        style=dict(style),
    )

    if config.DEBUG:
        print(
            f"[SequenceParser] {metadata.name}: {len(participants)} participants, "
            f"{len(messages)} messages, {len(diagram.blocks)} blocks"
        )
    return diagram


def parse_sequence(yaml_text: str) -> SequenceDiagram:
    return build_sequence(load_document(yaml_text))
