"""Prompt templates that ground answers in the selected excerpt."""
from typing import List, Optional

DOCUMENT_REFUSAL = "Not enough information in the document to answer that."
EXCERPT_REFUSAL = "Not enough information in the selected excerpt to answer that."

GROUNDING_INSTRUCTION = (
    "Instruction: Answer using the primary excerpt first. You may use the supplementary "
    "context only if the excerpt is insufficient or ambiguous. If the excerpt alone "
    "suffices, base the answer on it. If still not enough, respond: "
    f"'{DOCUMENT_REFUSAL}'"
)


def build_grounded_prompt(
    question: str,
    primary_excerpt: str = "",
    supplementary: Optional[List[str]] = None
) -> str:
    """
    Build the grounded prompt.

    Sections always appear in this order, each only when it has content:
    primary excerpt, supplementary context, question, instruction.
    """
    sections = []
    excerpt = (primary_excerpt or "").strip()
    if excerpt:
        sections.append(f'Primary excerpt (highlighted):\n"{excerpt}"')
    if supplementary:
        context_text = "\n\n".join(supplementary)
        sections.append(f"Supplementary relevant context:\n{context_text}")
    sections.append(f'Question: "{question}"')
    sections.append(GROUNDING_INSTRUCTION)
    return "\n\n".join(sections)


def build_excerpt_prompt(context: str, question: str) -> str:
    """Prompt for the excerpt-only /api/ask variant."""
    return (
        f'Excerpt: "{context}"\n\n'
        f'Question: "{question}"\n\n'
        f"Answer using only the excerpt. If insufficient, say: '{EXCERPT_REFUSAL}'"
    )
