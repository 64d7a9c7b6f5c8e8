import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from encounter_engine.application.services.dialogue_stepper import DialogueStepper
from encounter_engine.application.services.event_bus import EventBus
from encounter_engine.domain.events import DialogueChoiceProcessed
from encounter_engine.domain.models.character import AlignmentShift, Character, MoralAlignment
from encounter_engine.domain.models.encounter import EffectKind, EncounterEffect
from encounter_engine.domain.models.npc import NPC, DialogueNode, DialogueOption


def _elder(**overrides) -> NPC:
    values = dict(
        id="village_elder",
        name="Village Elder",
        description="A wise old man with weathered features",
        personality=["wise", "lawful", "good"],
        quest_giver=True,
        relationship=50,
        dialogue=[
            DialogueNode(
                id="greeting",
                speaker="Village Elder",
                text="Welcome, young traveler.",
                options=[
                    DialogueOption(
                        text="I seek knowledge about the ancient ruins.",
                        next_node_id="ruins_info",
                        requirements=["intelligence_10"],
                    ),
                    DialogueOption(
                        text="About that artifact you mentioned...",
                        next_node_id="artifact",
                        requirements=["quest_completed:find_ancient_scroll"],
                    ),
                    DialogueOption(text="Just passing through.", next_node_id="farewell"),
                ],
            ),
            DialogueNode(id="ruins_info", speaker="Village Elder", text="The ruins lie north."),
        ],
    )
    values.update(overrides)
    return NPC(**values)


class PresentDialogueTreeTests(unittest.TestCase):
    def test_returns_first_node_regardless_of_encounter(self) -> None:
        stepper = DialogueStepper()

        self.assertEqual("greeting", stepper.present_dialogue_tree(None, _elder()).id)

    def test_npc_without_dialogue_has_no_entry_node(self) -> None:
        self.assertIsNone(DialogueStepper().present_dialogue_tree(None, _elder(dialogue=[])))

    def test_find_node_follows_next_node_ids(self) -> None:
        npc = _elder()
        option = npc.dialogue[0].options[0]

        self.assertEqual("ruins_info", DialogueStepper.find_node(npc, option.next_node_id).id)
        self.assertIsNone(DialogueStepper.find_node(npc, "farewell"))
        self.assertIsNone(DialogueStepper.find_node(npc, None))


class AvailableOptionTests(unittest.TestCase):
    def test_stat_and_quest_prerequisites_filter_options(self) -> None:
        node = _elder().dialogue[0]
        scholar = Character(stats={"intelligence": 12}, completed_quests=["find_ancient_scroll"])
        novice = Character(stats={"intelligence": 6})

        scholar_texts = [option.text for option in DialogueStepper.available_dialogue_options(node, scholar)]
        novice_texts = [option.text for option in DialogueStepper.available_dialogue_options(node, novice)]

        self.assertEqual(3, len(scholar_texts))
        self.assertEqual(["Just passing through."], novice_texts)


class ProcessDialogueChoiceTests(unittest.TestCase):
    def test_moral_choice_updates_alignment_reputation_and_relationship(self) -> None:
        choice = DialogueOption(
            text="I will help you deal with the bandits.",
            next_node_id="hero_path",
            moral_alignment=AlignmentShift(good=5, lawful=3),
            effects=[
                EncounterEffect(EffectKind.REPUTATION, 10, target="village"),
                EncounterEffect(EffectKind.QUEST, "bandit_elimination"),
            ],
        )
        character = Character(reputation={"village": 0})
        npc = _elder()

        result = DialogueStepper().process_dialogue_choice(choice, character, npc)

        self.assertEqual(MoralAlignment(good=5, evil=0, lawful=3, chaotic=0), result.character.moral_alignment)
        self.assertEqual(10, result.character.reputation["village"])
        self.assertEqual(choice.effects, result.effects)
        self.assertEqual(66, result.npc.relationship)

    def test_inputs_are_left_untouched(self) -> None:
        choice = DialogueOption(
            text="Take the coin.",
            moral_alignment=AlignmentShift(evil=4),
            effects=[EncounterEffect(EffectKind.ITEM, "stolen_coin")],
        )
        character = Character()
        npc = _elder(personality=["evil"])

        result = DialogueStepper().process_dialogue_choice(choice, character, npc)

        self.assertEqual([], character.inventory)
        self.assertEqual(0, character.moral_alignment.evil)
        self.assertEqual(50, npc.relationship)
        self.assertEqual(["stolen_coin"], result.character.inventory)
        self.assertEqual(4, result.character.moral_alignment.evil)
        self.assertEqual(58, result.npc.relationship)

    def test_alignment_accumulates_without_clamping(self) -> None:
        stepper = DialogueStepper()
        choice = DialogueOption(text="Again.", moral_alignment=AlignmentShift(chaotic=60))
        character = Character()
        npc = _elder(personality=[])

        for _ in range(3):
            result = stepper.process_dialogue_choice(choice, character, npc)
            character, npc = result.character, result.npc

        self.assertEqual(180, character.moral_alignment.chaotic)

    def test_relationship_stays_within_bounds(self) -> None:
        stepper = DialogueStepper()
        cruel = DialogueOption(text="Mock the law.", moral_alignment=AlignmentShift(lawful=-30))
        kind = DialogueOption(text="Uphold the law.", moral_alignment=AlignmentShift(lawful=30))
        character = Character()
        npc = _elder(personality=["lawful"], relationship=0)

        for _ in range(5):
            result = stepper.process_dialogue_choice(cruel, character, npc)
            npc = result.npc
            self.assertGreaterEqual(npc.relationship, -100)
        self.assertEqual(-100, npc.relationship)

        for _ in range(10):
            npc = stepper.process_dialogue_choice(kind, character, npc).npc
            self.assertLessEqual(npc.relationship, 100)
        self.assertEqual(100, npc.relationship)

    def test_publishes_choice_event(self) -> None:
        bus = EventBus()
        seen = []
        bus.subscribe(DialogueChoiceProcessed, seen.append)
        choice = DialogueOption(text="For order.", moral_alignment=AlignmentShift(lawful=1))

        DialogueStepper(event_bus=bus).process_dialogue_choice(choice, Character(), _elder())

        self.assertEqual([DialogueChoiceProcessed("village_elder", "For order.", 50, 52)], seen)


class RelationshipChangeTests(unittest.TestCase):
    def test_matching_personality_doubles_axis(self) -> None:
        choice = DialogueOption(text="Order.", moral_alignment=AlignmentShift(lawful=3))

        self.assertEqual(6, DialogueStepper.calculate_relationship_change(choice, _elder(personality=["lawful"])))
        self.assertEqual(0, DialogueStepper.calculate_relationship_change(choice, _elder(personality=["chaotic"])))

    def test_multiple_axes_sum(self) -> None:
        choice = DialogueOption(text="Mixed.", moral_alignment=AlignmentShift(good=2, evil=-1, chaotic=4))
        npc = _elder(personality=["good", "evil", "greedy"])

        self.assertEqual(2, DialogueStepper.calculate_relationship_change(choice, npc))

    def test_fractional_change_rounds_down(self) -> None:
        npc = _elder(personality=["good"])

        positive = DialogueOption(text="Slight.", moral_alignment=AlignmentShift(good=1.3))
        negative = DialogueOption(text="Slight.", moral_alignment=AlignmentShift(good=-1.3))

        self.assertEqual(2, DialogueStepper.calculate_relationship_change(positive, npc))
        self.assertEqual(-3, DialogueStepper.calculate_relationship_change(negative, npc))

    def test_negative_fractional_shift_lowers_relationship_by_floor(self) -> None:
        npc = _elder(personality=["lawful"], relationship=10)
        choice = DialogueOption(text="Bend the rule.", moral_alignment=AlignmentShift(lawful=-1.25))

        self.assertEqual(-3, DialogueStepper.calculate_relationship_change(choice, npc))
        result = DialogueStepper().process_dialogue_choice(choice, Character(), npc)

        self.assertEqual(7, result.npc.relationship)

    def test_choice_without_alignment_changes_nothing(self) -> None:
        self.assertEqual(0, DialogueStepper.calculate_relationship_change(DialogueOption(text="Hm."), _elder()))

    def test_update_npc_relationship_clamps(self) -> None:
        npc = _elder(relationship=95)

        self.assertEqual(100, DialogueStepper.update_npc_relationship(npc, 20).relationship)
        self.assertEqual(-100, DialogueStepper.update_npc_relationship(npc, -500).relationship)
        self.assertEqual(95, npc.relationship)

    def test_npc_construction_clamps_relationship(self) -> None:
        self.assertEqual(100, _elder(relationship=250).relationship)


if __name__ == "__main__":
    unittest.main()
