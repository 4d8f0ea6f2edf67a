from __future__ import annotations

import argparse
import json
from pathlib import Path

from quizforge.core.logging import setup_logging
from quizforge.schemas.quiz import Difficulty
from quizforge.services.llm_service import LLMService
from quizforge.services.quiz_parser import parse_quiz_report


def main() -> None:
    parser = argparse.ArgumentParser(description="Quick quiz generation/parse check")
    parser.add_argument("title", nargs="?", default="Python Basics")
    parser.add_argument("--topic", default="Programming")
    parser.add_argument("--difficulty", default="INTERMEDIATE", choices=[d.value for d in Difficulty])
    parser.add_argument("--count", type=int, default=3)
    parser.add_argument("--file", type=Path, default=None, help="Parse a saved completion instead of calling the LLM")
    parser.add_argument("--require-explanations", action="store_true")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()

    setup_logging(args.log_level)

    if args.file is not None:
        text = args.file.read_text(encoding="utf-8")
    else:
        from quizforge.services.quiz_generator import build_quiz_messages

        messages = build_quiz_messages(
            title=args.title,
            topic=args.topic,
            difficulty=Difficulty(args.difficulty),
            question_count=args.count,
        )
        text = LLMService().chat(messages)
        print("--- completion ---")
        print(text)

    report = parse_quiz_report(
        text,
        require_explanations=args.require_explanations,
        expected_count=None if args.file else args.count,
    )
    print("--- report ---")
    print(json.dumps(report.model_dump(mode="json", exclude_none=True), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
