from engine.Events import GameEvent


class Interface:

    def __init__(self):
        self.core = None

    def onStart(self):
        pass

    def onEvent(self, event: GameEvent):
        """
        Invoked for every event, in order, while a command runs.
        :param event:
        :return:
        """
        pass

    def onCommandFinished(self, events: list):
        """
        Invoked once a command has completed with all the events it produced.
        :param events:
        :return:
        """
        self.notifyRedraw()

    def notifyRedraw(self):
        pass

    def onWin(self, score: int):
        pass
