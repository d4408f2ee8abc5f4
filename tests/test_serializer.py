import json
import unittest

from engine import Serializer
from engine.Core import GameConfig, GameEngine
from engine.Errors import CorruptSaveData
from engine.Moves import DealMove, RunRemovalMove, TransferMove, moveFromDict
from engine.Scoring import INITIAL_SCORE
from engine.Tableau import COLUMNS

SEED = 424242


def make_engine(suits=4, seed=SEED):
    engine = GameEngine(GameConfig(suits=suits, seed=seed))
    engine.newGame()
    return engine


def faces(engine):
    return [[card.faceUp for card in pile] for pile in engine.tableau.piles]


def make_engine_with_transfer():
    """A dealt game in which one column top has been moved onto another."""
    for seed in range(SEED, SEED + 50):
        engine = make_engine(seed=seed)
        for src in COLUMNS:
            card = engine.tableau.top(src)
            for target in COLUMNS:
                if target != src and engine.tableau.top(target).suitableAsBaseFor(card):
                    engine.askMove(card.id, target)
                    return engine, seed
    raise AssertionError("no seed gave a legal first move")


def with_moves(moves):
    record = make_engine().toRecord()
    record["moves"] = moves
    return record


class SerializerTestCase(unittest.TestCase):
    def test_record_round_trip_resumes_game(self):
        engine = make_engine()
        engine.askDeal()
        engine.statPlayed = 4
        engine.statWon = 1
        engine.playerName = "Ann"
        record = json.loads(json.dumps(engine.toRecord()))
        self.assertEqual(
            {"deck", "piles", "moves", "score", "highScores", "playerName", "statPlayed", "statWon"},
            set(record),
        )

        restored = GameEngine()
        self.assertTrue(restored.loadRecord(record))
        self.assertEqual(engine.tableau.pileIds(), restored.tableau.pileIds())
        self.assertEqual(faces(engine), faces(restored))
        self.assertEqual(engine.score, restored.score)
        self.assertEqual(1, len(restored.history))
        self.assertEqual((4, 1, "Ann"), (restored.statPlayed, restored.statWon, restored.playerName))
        self.assertEqual(4, restored.suitCount)
        self.assertTrue(restored.playing)

        self.assertTrue(restored.askUndo())
        self.assertEqual(10, len(restored.tableau[4]))

    def test_suit_count_comes_from_the_deck(self):
        record = make_engine(suits=1).toRecord()
        record["suitCount"] = 4
        restored = GameEngine()
        self.assertTrue(restored.loadRecord(record))
        self.assertEqual(1, restored.suitCount)

    def test_short_deck_falls_back_to_fresh_game(self):
        record = make_engine().toRecord()
        record["deck"] = record["deck"][:103]
        restored = GameEngine(GameConfig(suits=2, seed=7))
        with self.assertLogs("engine.Core", level="WARNING"):
            self.assertFalse(restored.loadRecord(record))
        self.assertEqual(104, restored.tableau.cardCount())
        self.assertEqual(0, len(restored.history))
        self.assertEqual(2, restored.suitCount)
        self.assertEqual(INITIAL_SCORE, restored.score)

    def test_piles_must_partition_the_deck(self):
        record = make_engine().toRecord()
        record["piles"][COLUMNS[0]].append(record["piles"][COLUMNS[1]][0])
        with self.assertRaises(CorruptSaveData):
            Serializer.fromRecord(record)

        record = make_engine().toRecord()
        record["piles"][COLUMNS[0]].pop()
        with self.assertRaises(CorruptSaveData):
            Serializer.fromRecord(record)

        with self.assertRaises(CorruptSaveData):
            Serializer.fromRecord(["not", "a", "record"])

    def test_deck_composition_is_checked(self):
        rows = Serializer.encodeDeck(make_engine().deck)
        rows[0] = dict(rows[0], rank="Z")
        with self.assertRaises(CorruptSaveData):
            Serializer.decodeDeck(rows)

        rows = Serializer.encodeDeck(make_engine().deck)
        rows[0] = dict(rows[0], rank="A" if rows[0]["rank"] != "A" else "2")
        with self.assertRaises(CorruptSaveData):
            Serializer.decodeDeck(rows)

    def test_legacy_card_and_score_keys(self):
        record = make_engine().toRecord()
        for row in record["deck"]:
            row["value"] = row.pop("rank")
        record["highScores"] = [
            {"score": 640, "date": "2018-03-04T10:00:00.000Z", "player": "Old"},
            "garbage",
        ]
        restored = GameEngine()
        self.assertTrue(restored.loadRecord(record))
        self.assertEqual(1, len(restored.highScores))
        self.assertEqual((4, 640, "Old"), (
            restored.highScores[0].suitCount,
            restored.highScores[0].score,
            restored.highScores[0].playerName,
        ))

    def test_restore_deck_deals_the_starting_position(self):
        original = make_engine()
        start_ids = original.tableau.pileIds()
        start_faces = faces(original)
        original.askDeal()
        rows = json.loads(json.dumps(Serializer.encodeDeck(original.deck)))

        restored = GameEngine(GameConfig(seed=1))
        restored.newGame()
        self.assertTrue(restored.restore(rows))
        self.assertEqual(start_ids, restored.tableau.pileIds())
        self.assertEqual(start_faces, faces(restored))
        self.assertEqual(INITIAL_SCORE, restored.score)
        self.assertEqual(0, len(restored.history))
        self.assertTrue(restored.playing)

    def test_restore_rejects_wrong_length(self):
        rows = Serializer.encodeDeck(make_engine().deck)[:100]
        restored = GameEngine(GameConfig(seed=3))
        with self.assertLogs("engine.Core", level="WARNING"):
            self.assertFalse(restored.restore(rows))
        self.assertEqual(104, restored.tableau.cardCount())
        self.assertFalse(restored.playing)

    def test_game_string_round_trip(self):
        engine = make_engine(suits=2)
        code = engine.gameString()
        self.assertNotIn('"', code)
        decoded = Serializer.decodeGameString(code)
        self.assertEqual([(c.suit, c.rank) for c in engine.deck], [(c.suit, c.rank) for c in decoded])

        other = GameEngine()
        self.assertTrue(other.restoreFromString(code))
        self.assertEqual(2, other.suitCount)
        with self.assertLogs("engine.Core", level="WARNING"):
            self.assertFalse(other.restoreFromString("not a game"))

    def test_played_moves_survive_a_reload(self):
        engine, seed = make_engine_with_transfer()
        engine.askDeal()
        record = json.loads(json.dumps(engine.toRecord()))
        self.assertEqual(["transfer", "deal"], [move["kind"] for move in record["moves"]])

        restored = GameEngine()
        self.assertTrue(restored.loadRecord(record))
        self.assertTrue(restored.askUndo())
        self.assertTrue(restored.askUndo())
        self.assertEqual(0, len(restored.history))
        self.assertEqual(104, restored.tableau.cardCount())
        start = make_engine(seed=seed)
        self.assertEqual(start.tableau.pileIds(), restored.tableau.pileIds())
        self.assertEqual(faces(start), faces(restored))

    def test_moves_naming_the_wrong_piles_are_rejected(self):
        bad = [
            {"kind": "transfer", "cardId": 60, "sourceColumn": 99, "targetPile": 14, "turnedCardBeneath": False},
            {"kind": "transfer", "cardId": 60, "sourceColumn": 2, "targetPile": 14, "turnedCardBeneath": False},
            {"kind": "transfer", "cardId": 60, "sourceColumn": 14, "targetPile": 14, "turnedCardBeneath": False},
            {"kind": "deal", "reservePile": 5},
            {"kind": "runRemoval", "sourceColumn": 4, "foundationPile": 5, "turnedCardBeneath": False},
            {"kind": "runRemoval", "sourceColumn": 13, "foundationPile": 14, "turnedCardBeneath": False},
        ]
        for move in bad:
            with self.subTest(move=move):
                with self.assertRaises(CorruptSaveData):
                    Serializer.fromRecord(with_moves([move]))

    def test_moves_that_cannot_be_undone_are_rejected(self):
        engine = make_engine()
        top = engine.tableau.top(COLUMNS[1])
        bad = [
            # foundation 5 is empty
            {"kind": "runRemoval", "sourceColumn": 13, "foundationPile": 5, "turnedCardBeneath": True},
            # every reserve is still full
            {"kind": "deal", "reservePile": 4},
            # the card sits on column 14, not column 13
            {"kind": "transfer", "cardId": top.id, "sourceColumn": 15, "targetPile": 13, "turnedCardBeneath": False},
            # the card is in a reserve
            {"kind": "transfer", "cardId": 0, "sourceColumn": 15, "targetPile": 13, "turnedCardBeneath": False},
        ]
        for move in bad:
            with self.subTest(move=move):
                with self.assertRaises(CorruptSaveData):
                    Serializer.fromRecord(with_moves([move]))

    def test_turned_card_must_be_face_up_on_the_source(self):
        engine, seed = make_engine_with_transfer()
        record = engine.toRecord()
        move = record["moves"][0]
        self.assertTrue(move["turnedCardBeneath"])
        column = record["piles"][move["sourceColumn"]]
        record["deck"][column[-1]]["facingUp"] = False
        with self.assertRaises(CorruptSaveData):
            Serializer.fromRecord(record)

    def test_bad_move_log_loads_a_fresh_game(self):
        record = with_moves([
            {"kind": "transfer", "cardId": 60, "sourceColumn": 99, "targetPile": 14, "turnedCardBeneath": False},
        ])
        restored = GameEngine(GameConfig(seed=8))
        with self.assertLogs("engine.Core", level="WARNING"):
            self.assertFalse(restored.loadRecord(record))
        self.assertEqual(0, len(restored.history))
        self.assertFalse(restored.askUndo())
        self.assertEqual(104, restored.tableau.cardCount())

    def test_move_records_parse_both_formats(self):
        self.assertEqual(DealMove(3), moveFromDict(DealMove(3).toDict()))
        self.assertEqual(
            TransferMove(12, 13, 15, True),
            moveFromDict({"cardId": 12, "sourcePile": 13, "targetPile": 15, "resultedInTurn": True}),
        )
        self.assertEqual(
            DealMove(4),
            moveFromDict({"cardId": -1, "sourcePile": 4, "targetPile": -1, "resultedInTurn": -1}),
        )
        self.assertEqual(
            RunRemovalMove(15, 5, False),
            moveFromDict({"cardId": -2, "sourcePile": 15, "targetPile": 5, "resultedInTurn": False}),
        )
        with self.assertRaises(CorruptSaveData):
            moveFromDict({"kind": "teleport"})
        with self.assertRaises(CorruptSaveData):
            moveFromDict({"kind": "transfer", "cardId": 1})


if __name__ == "__main__":
    unittest.main()
