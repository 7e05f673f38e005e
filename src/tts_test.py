"""Manual tester for ElevenLabs TTS integration."""

import argparse
import logging
import time

from suggestions import WORD_DICTIONARY
from tts_elevenlabs import speak_text


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Speak text or dictionary words via ElevenLabs TTS."
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="Text to speak once.",
    )
    parser.add_argument(
        "--dictionary",
        action="store_true",
        help="Speak every suggestion dictionary word in sequence.",
    )
    parser.add_argument(
        "--wait",
        type=float,
        default=3.0,
        help="Seconds to keep running so the background player can finish.",
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    if args.dictionary:
        phrases = list(WORD_DICTIONARY)
    elif args.text:
        phrases = [args.text]
    else:
        parser.print_help()
        return 1

    for phrase in phrases:
        accepted, reason = speak_text(phrase)
        print(f"'{phrase}' -> {reason}")
        if not accepted and reason == "not_configured":
            return 1
        # Pause so each word gets played before the next one is queued.
        time.sleep(args.wait if len(phrases) > 1 else 0.2)

    time.sleep(args.wait)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
