from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .diagram import DiagramMetadata


PARTICIPANT_TYPES = ("actor", "participant", "database")
MESSAGE_TYPES = ("sync", "async")
BLOCK_TYPES = ("alt", "opt", "loop", "par", "rect")
CONDITIONAL_BLOCK_TYPES = ("alt", "opt", "loop")


@dataclass
class Participant:
    id: str
    type: str                               # actor | participant | database
    label: str
    description: Optional[str] = None
    order: Optional[float] = None
    group: Optional[str] = None
    color: Optional[str] = None


@dataclass
class Message:
    id: str
    source: str                             # YAML "from"
    target: str                             # YAML "to"
    label: str
    type: str = "sync"
    sequence_order: float = 0
    arrow_type: str = "solid"
    return_message: Optional[str] = None
    note: Optional[str] = None


@dataclass
class Block:
    id: str
    type: str
    condition: Optional[str] = None
    messages: List[str] = field(default_factory=list)
    parent_block: Optional[str] = None
    label: Optional[str] = None


@dataclass
class Note:
    id: str
    text: str
    attached_to: List[str] = field(default_factory=list)
    position: Optional[str] = None


@dataclass
class SequenceDiagram:
    metadata: DiagramMetadata
    participants: List[Participant] = field(default_factory=list)
    messages: List[Message] = field(default_factory=list)
    blocks: List[Block] = field(default_factory=list)
    notes: List[Note] = field(default_factory=list)
    style: Dict[str, Any] = field(default_factory=dict)

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def ordered_participants(self) -> List[Participant]:
        """Participants by explicit ``order``; unordered ones keep declaration order."""
        indexed = list(enumerate(self.participants))
        indexed.sort(key=lambda item: (item[1].order if item[1].order is not None else 0, item[0]))
        return [p for _, p in indexed]

    def ordered_messages(self) -> List[Message]:
        return sorted(self.messages, key=lambda m: m.sequence_order)
