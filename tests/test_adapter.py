import unittest

from engine.Cards import Card
from engine.Core import GameConfig, GameEngine
from engine.Events import CardFlipped, CardMoved, DealDisabled, GameWon, InvalidMove, NoMoreMoves, RunRemoved
from engine.Tableau import COLUMNS, PILE_COUNT
from frontend.adapter import EngineAdapter


class EngineAdapterTestCase(unittest.TestCase):
    def test_snapshot_of_new_game(self):
        engine = GameEngine(GameConfig(suits=2, seed=8))
        engine.newGame()
        vm = EngineAdapter.snapshot(engine)
        self.assertEqual(PILE_COUNT, len(vm.piles))
        self.assertEqual("reserve", vm.piles[0].kind)
        self.assertEqual("foundation", vm.piles[5].kind)
        self.assertEqual("column", vm.piles[13].kind)
        self.assertEqual(500, vm.score)
        self.assertEqual(2, vm.suit_count)
        self.assertTrue(vm.can_deal)
        self.assertFalse(vm.can_undo)
        self.assertFalse(vm.won)
        for idx in COLUMNS:
            top = vm.piles[idx].cards[-1]
            self.assertTrue(top.face_up)
            self.assertTrue(top.draggable)
            self.assertFalse(vm.piles[idx].cards[0].draggable)

    def test_snapshot_marks_draggable_runs(self):
        piles = [[] for _ in range(PILE_COUNT)]
        piles[COLUMNS[0]] = [Card(0, "s", "9", True), Card(1, "h", "8", True), Card(2, "h", "7", True)]
        engine = GameEngine()
        engine.loadPosition(piles)
        vm = EngineAdapter.snapshot(engine)
        self.assertEqual([False, True, True], [c.draggable for c in vm.piles[COLUMNS[0]].cards])
        self.assertFalse(vm.can_deal)

    def test_event_mapping(self):
        mapping = {
            CardMoved(3, 13, 14): "MOVE",
            CardFlipped(3, True): "FLIP",
            RunRemoved(5, tuple(range(13))): "COMPLETE_SUIT",
            GameWon(612): "WIN",
            DealDisabled(): "DEAL_DISABLED",
            InvalidMove("nope"): "MESSAGE",
            NoMoreMoves("none"): "MESSAGE",
        }
        for event, expected in mapping.items():
            self.assertEqual(expected, EngineAdapter.event_to_animation(event).type)
        self.assertEqual({"text": "nope"}, EngineAdapter.event_to_animation(InvalidMove("nope")).payload)
        self.assertEqual(14, EngineAdapter.event_to_animation(CardMoved(3, 13, 14)).payload["dest"])


if __name__ == "__main__":
    unittest.main()
