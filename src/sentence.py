"""Sentence buffer that accepted gestures are written into."""

from config import DELETE_LABELS, IGNORED_LABELS, SPACE_LABELS


class SentenceBuffer:
    """
    Holds the text built from accepted gestures plus the first letter typed
    since the last clear (used for word suggestions).
    """

    def __init__(self, delete_labels=None, space_labels=None, ignored_labels=None):
        self.delete_labels = set(DELETE_LABELS if delete_labels is None else delete_labels)
        self.space_labels = set(SPACE_LABELS if space_labels is None else space_labels)
        self.ignored_labels = set(IGNORED_LABELS if ignored_labels is None else ignored_labels)
        self.text = ""
        self.first_letter = None

    def __len__(self):
        return len(self.text)

    def apply(self, label):
        """Interpret one accepted label. Returns True when the text changed."""
        if label in self.delete_labels:
            if not self.text:
                return False
            self.text = self.text[:-1]
            return True

        if label in self.space_labels:
            self.text += " "
            return True

        if label in self.ignored_labels:
            return False

        if len(label) == 1 and label.isprintable():
            self.text += label
            if self.first_letter is None and label.isalpha():
                self.first_letter = label.upper()
            return True

        return False

    def clear(self):
        self.text = ""
        self.first_letter = None

    def replace(self, word):
        """Swap the whole sentence for a chosen suggestion."""
        self.text = word
