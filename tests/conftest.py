import pytest


class FakeSpeaker:
    """Records spoken text instead of calling ElevenLabs."""

    def __init__(self):
        self.spoken = []

    def __call__(self, text):
        self.spoken.append(text)
        return True, "accepted"


@pytest.fixture
def speaker():
    return FakeSpeaker()
