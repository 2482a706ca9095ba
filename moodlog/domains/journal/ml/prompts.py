"""Prompt templates for the annotation model."""

from __future__ import annotations

from typing import Iterable

ANALYZE_ENTRY = {
    "role": "You are a compassionate mood and emotion analyzer.",
    "task": (
        "Analyze the following journal entry and describe:\n"
        "1. The detected mood or emotion as one or two words\n"
        "2. The main subject of the entry\n"
        "3. A brief summary\n"
        "4. Whether the overall sentiment is negative\n"
        "5. A color that represents the mood\n"
        "6. A sentiment score from -10 (most negative) to 10 (most positive)"
    ),
    "format": (
        "Return ONLY a JSON object with keys: mood (string), subject (string), "
        "summary (string), color (hex string such as #22c55e), negative (boolean), "
        "sentimentScore (integer between -10 and 10)."
    ),
}

ANSWER_QUESTION = {
    "role": "You are a helpful assistant that answers questions about a person's journal entries.",
    "task": (
        "Based on the journal entries below, answer the question thoughtfully and concisely.\n"
        "- Be clear, empathetic and supportive\n"
        "- Reference specific entries when relevant\n"
        "- If the journals cannot answer the question, say so politely\n"
        "- Keep the answer to 2-4 sentences\n"
        "- For counting or rating questions, give concrete numbers and the most common moods"
    ),
    "format": "Return ONLY the answer as plain text, without JSON or markdown.",
}


def build_analysis_prompt(content: str) -> str:
    return "\n\n".join(
        [ANALYZE_ENTRY["role"], ANALYZE_ENTRY["task"], ANALYZE_ENTRY["format"], f"Journal entry:\n{content}"]
    )


def build_question_prompt(question: str, contents: Iterable[str]) -> str:
    journals = "\n\n".join(f"Entry {idx}:\n{text}" for idx, text in enumerate(contents, start=1))
    return "\n\n".join(
        [
            ANSWER_QUESTION["role"],
            ANSWER_QUESTION["task"],
            ANSWER_QUESTION["format"],
            f"Journal entries:\n{journals}",
            f"Question: {question}",
        ]
    )
