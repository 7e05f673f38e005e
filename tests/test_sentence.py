import pytest

from sentence import SentenceBuffer


@pytest.fixture
def buffer():
    return SentenceBuffer(
        delete_labels={"DEL", "Backspace"},
        space_labels={"SPACE", " "},
        ignored_labels={"UNKNOWN", "UNCERTAIN"},
    )


def test_delete_removes_last_character(buffer):
    buffer.text = "HI"
    assert buffer.apply("DEL") is True
    assert buffer.text == "H"


def test_delete_on_empty_sentence_is_noop(buffer):
    assert buffer.apply("Backspace") is False
    assert buffer.text == ""


@pytest.mark.parametrize("label", ["SPACE", " "])
def test_space_appends_space(buffer, label):
    buffer.apply("A")
    buffer.apply(label)
    assert buffer.text == "A "


def test_letters_append_and_record_first_letter(buffer):
    buffer.apply("g")
    buffer.apply("O")
    assert buffer.text == "gO"
    assert buffer.first_letter == "G"


def test_first_letter_skips_non_alphabetic(buffer):
    buffer.apply("7")
    assert buffer.first_letter is None
    buffer.apply("b")
    assert buffer.first_letter == "B"


@pytest.mark.parametrize("label", ["UNKNOWN", "UNCERTAIN", "next", "", "\n"])
def test_other_labels_do_not_mutate(buffer, label):
    buffer.text = "AB"
    assert buffer.apply(label) is False
    assert buffer.text == "AB"


def test_clear_resets_text_and_first_letter(buffer):
    buffer.apply("H")
    buffer.clear()
    assert buffer.text == ""
    assert buffer.first_letter is None
    buffer.apply("y")
    assert buffer.first_letter == "Y"


def test_replace_with_suggestion(buffer):
    buffer.apply("h")
    buffer.replace("hello")
    assert buffer.text == "hello"
    assert len(buffer) == 5
