import pytest


class FakeLogger:
    """Records prompts and printed lines; answers prompts from a list."""

    def __init__(self, answers=True):
        self.answers = answers
        self.prompts = []
        self.messages = []
        self.lines = []

    def prompt(self, message):
        self.prompts.append(message)
        if isinstance(self.answers, list):
            return self.answers[len(self.prompts) - 1]
        return self.answers

    def printf(self, message, *args):
        self.messages.append(message % args if args else message)

    def println(self, message):
        self.lines.append(message)

    def no_confirm(self):
        self.answers = True


@pytest.fixture
def logger():
    return FakeLogger()


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    # Page and poll delays are real sleeps; tests never wait on them.
    sleeps = []
    monkeypatch.setattr('time.sleep', lambda seconds: sleeps.append(seconds))
    return sleeps
