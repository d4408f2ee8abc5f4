import argparse
import logging

from engine.Cards import SUIT_COUNTS, SUIT_SYMBOLS
from engine.Core import GameEngine
from engine.Interface import Interface
from engine.Scoring import winRate
from engine.Tableau import COLUMNS, FOUNDATION_PILES, RESERVE_PILES
from frontend import game_store, settings_store
from frontend.adapter import EngineAdapter

LOGGER = logging.getLogger(__name__)

HELP = (
    "Commands:\n"
    "  mv <card> <column>   move a card (and the cards on it) onto column 0-9\n"
    "  deal                 deal a row from the stock\n"
    "  undo                 take back the last move\n"
    "  new [suits]          start a new game with 1, 2 or 4 suits\n"
    "  code                 print the code of this deal\n"
    "  restore <code>       replay a deal from its code\n"
    "  name <player>        set the name used for high scores\n"
    "  scores               show statistics and high scores\n"
    "  quit                 leave the game"
)


def cardStr(card) -> str:
    if not card.face_up:
        return "  ---  "
    mark = "*" if card.draggable else " "
    return f"{card.id:>3}{mark}{SUIT_SYMBOLS[card.suit]}{card.rank:<2}"


class CommandLineInterface(Interface):

    def printAll(self):
        view = EngineAdapter.snapshot(self.core)
        stock = sum(len(view.piles[i].cards) for i in RESERVE_PILES)
        done = sum(1 for i in FOUNDATION_PILES if view.piles[i].cards)
        print(f"Score: {view.score}    Suits: {view.suit_count}    Stock: {stock}    Finished: {done}")
        print("".join(f"---{n}----" for n in range(len(COLUMNS))))
        columns = [view.piles[i].cards for i in COLUMNS]
        row = 0
        while True:
            has = False
            line = ""
            for cards in columns:
                if len(cards) <= row:
                    line += " " * 8
                    continue
                has = True
                line += cardStr(cards[row]) + " "
            if not has:
                break
            print(line.rstrip())
            row += 1
        print()

    def onStart(self):
        print("Game started!")

    def onCommandFinished(self, events):
        for event in events:
            animation = EngineAdapter.event_to_animation(event)
            if animation.type == "MESSAGE":
                print(animation.payload["text"])
            elif animation.type == "COMPLETE_SUIT":
                print(f"Completed a suit! It went to pile {animation.payload['foundation']}.")
            elif animation.type == "DEAL_DISABLED":
                print("The stock is empty.")
        super().onCommandFinished(events)

    def notifyRedraw(self):
        self.printAll()

    def onWin(self, score):
        print(f"You win! Final score: {score}")


def printScores(engine: GameEngine):
    rate = winRate(engine.statPlayed, engine.statWon)
    print(f"Player: {engine.playerName or '-'}    Played: {engine.statPlayed}    "
          f"Won: {engine.statWon}    ({rate:.2f}%)")
    for entry in engine.highScores:
        print(f"  {entry.suitCount} suit  {entry.score:>5}  {entry.date[:10]}  {entry.playerName}")


def execute(engine: GameEngine, command: str) -> bool:
    """
    Run one line of input.
    :return: False when the player wants to quit
    """
    parts = command.split()
    if len(parts) == 0:
        return True
    name = parts[0]
    if name == "quit":
        return False
    if name == "mv" and len(parts) == 3:
        try:
            cardId = int(parts[1])
            column = int(parts[2])
        except ValueError:
            print("Invalid index!")
            return True
        if not 0 <= column < len(COLUMNS):
            print("Invalid index!")
            return True
        engine.askMove(cardId, COLUMNS[column])
    elif name == "deal":
        engine.askDeal()
    elif name == "undo":
        engine.askUndo()
    elif name == "new":
        suits = engine.config.suits
        if len(parts) > 1:
            try:
                suits = int(parts[1])
            except ValueError:
                suits = -1
            if suits not in SUIT_COUNTS:
                print(f"Suits must be one of {', '.join(map(str, SUIT_COUNTS))}")
                return True
        engine.newGame(suits)
    elif name == "code":
        print(engine.gameString())
    elif name == "restore" and len(parts) > 1:
        code = command.strip()[len("restore"):].strip()
        if not engine.restoreFromString(code):
            print("That code is not a valid game, a new game was started instead.")
    elif name == "name" and len(parts) > 1:
        engine.setPlayerName(" ".join(parts[1:]))
    elif name == "scores":
        printScores(engine)
    elif name == "help":
        print(HELP)
    else:
        print("Invalid command! Type 'help' for the list of commands.")
    return True


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Spider Solitaire in the terminal.")
    parser.add_argument("--suits", type=int, choices=SUIT_COUNTS, default=None, help="Suit count for new games.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible deal.")
    parser.add_argument("--slot", type=int, default=None, help="Save slot (1-3).")
    parser.add_argument("--new", action="store_true", help="Ignore the saved game and start a new one.")
    parser.add_argument("--log-level", default=None, choices=settings_store.LOG_LEVELS, help="Logging level.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    settings = settings_store.load_settings()
    if args.suits is not None:
        settings["suit_count"] = str(args.suits)
    logging.basicConfig(
        level=getattr(logging, args.log_level or settings["log_level"]),
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    slot = args.slot if args.slot is not None else int(settings["save_slot"])

    engine = GameEngine(settings_store.build_config(settings, seed=args.seed))
    engine.registerInterface(CommandLineInterface())
    record = None if args.new else game_store.load_record(slot)
    if record is None:
        engine.newGame()
    elif not engine.loadRecord(record):
        print("The saved game could not be read, a new game was started.")
    engine.registerPersistence(lambda rec: game_store.save_record(rec, slot))
    game_store.save_game(engine, slot)

    print(HELP)
    while True:
        try:
            command = input("> ")
        except EOFError:
            break
        if not execute(engine, command):
            break
    LOGGER.debug("leaving, game saved in slot %d", slot)


if __name__ == '__main__':
    main()
