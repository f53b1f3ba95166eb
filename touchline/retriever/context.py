"""
Context Assembler

Renders result sets as indexed, tagged text blocks and joins them into the
retrieval context handed to generation.

Empty result sets are omitted entirely: a tag only appears when it has
at least one result under it.
"""

from typing import List, Sequence, Tuple

from .results import RawResult

Section = Tuple[str, Sequence[RawResult]]

RETRIEVED_CONTEXT_INSTRUCTION = (
    "Use the retrieved context above to answer the user's question accurately. "
    "If the context doesn't contain the information needed, say so clearly "
    "rather than guessing."
)


def format_result(result: RawResult, index: int) -> str:
    """Render one result as `[i] text` plus its attribution line"""
    if result.source == "web" and result.title:
        lines = [f"[{index}] {result.title}"]
        # Blank lines only ever separate blocks
        if result.text.strip():
            lines.append(result.text)
    else:
        lines = [f"[{index}] {result.text}"]

    if result.is_scored:
        lines.append(f"(Relevance: {result.score * 100:.1f}%)")
    elif result.url:
        lines.append(f"(Source: {result.url})")

    if result.media_url:
        lines.append(f"Media: {result.media_url}")

    return "\n".join(lines)


def format_section(tag: str, results: Sequence[RawResult]) -> str:
    """Wrap the rendered results in <tag>...</tag>"""
    body = "\n\n".join(format_result(r, i) for i, r in enumerate(results, 1))
    return f"<{tag}>\n{body}\n</{tag}>"


def assemble(sections: Sequence[Section]) -> str:
    """
    Join non-empty sections in the order given.

    Args:
        sections: (tag, results) pairs, one per source queried

    Returns:
        The retrieval context, or "" when nothing was retrieved
    """
    blocks: List[str] = [
        format_section(tag, results)
        for tag, results in sections
        if results
    ]
    return "\n\n".join(blocks)


def with_retrieved_context(system_prompt: str, context: str) -> str:
    """Attach a retrieval context to a system prompt (no-op when empty)"""
    if not context:
        return system_prompt
    return (
        f"{system_prompt}\n\n<retrieved_context>\n{context}\n</retrieved_context>\n\n"
        f"{RETRIEVED_CONTEXT_INSTRUCTION}"
    )
