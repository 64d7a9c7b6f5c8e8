from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional


ALIGNMENT_AXES = ("good", "evil", "lawful", "chaotic")


@dataclass
class MoralAlignment:
    good: float = 0
    evil: float = 0
    lawful: float = 0
    chaotic: float = 0

    def shifted(self, shift: "AlignmentShift") -> "MoralAlignment":
        """Return a new alignment with every present axis of ``shift`` added on."""

        values = {axis: getattr(self, axis) for axis in ALIGNMENT_AXES}
        for axis, delta in shift.present_axes().items():
            values[axis] = values[axis] + delta
        return MoralAlignment(**values)


@dataclass(frozen=True)
class AlignmentShift:
    good: Optional[float] = None
    evil: Optional[float] = None
    lawful: Optional[float] = None
    chaotic: Optional[float] = None

    def present_axes(self) -> Dict[str, float]:
        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not None
        }


@dataclass
class Character:
    level: int = 1
    health: float = 100
    max_health: float = 100
    mana: float = 0
    max_mana: float = 0
    stats: Dict[str, int] = field(default_factory=dict)
    inventory: List[str] = field(default_factory=list)
    active_quests: List[str] = field(default_factory=list)
    completed_quests: List[str] = field(default_factory=list)
    reputation: Dict[str, int] = field(default_factory=dict)
    moral_alignment: MoralAlignment = field(default_factory=MoralAlignment)

    def __post_init__(self) -> None:
        deduped: List[str] = []
        for item_id in self.inventory:
            if item_id not in deduped:
                deduped.append(item_id)
        self.inventory = deduped

    def snapshot(self) -> "Character":
        """Return a copy whose containers can be changed without touching this one."""

        return Character(
            level=self.level,
            health=self.health,
            max_health=self.max_health,
            mana=self.mana,
            max_mana=self.max_mana,
            stats=dict(self.stats),
            inventory=list(self.inventory),
            active_quests=list(self.active_quests),
            completed_quests=list(self.completed_quests),
            reputation=dict(self.reputation),
            moral_alignment=MoralAlignment(
                good=self.moral_alignment.good,
                evil=self.moral_alignment.evil,
                lawful=self.moral_alignment.lawful,
                chaotic=self.moral_alignment.chaotic,
            ),
        )

    def has_quest(self, quest_id: str) -> bool:
        return quest_id in self.active_quests or quest_id in self.completed_quests
