"""Static reference corpus for internal comparison."""

from dataclasses import dataclass

CORPUS_VERSION = "1"


@dataclass(frozen=True)
class ReferenceDocument:
    """A canonical reference text."""

    doc_id: str
    title: str
    text: str


def build_corpus(texts: list[str], prefix: str = "internal") -> tuple[ReferenceDocument, ...]:
    """Wrap plain texts as reference documents titled "Internal Document N"."""
    return tuple(
        ReferenceDocument(
            doc_id=f"{prefix}-{i}",
            title=f"Internal Document {i}",
            text=text,
        )
        for i, text in enumerate(texts, start=1)
    )


DEFAULT_CORPUS: tuple[ReferenceDocument, ...] = build_corpus(
    [
        "Academic integrity is fundamental to the educational process.",
        "Plagiarism undermines the value of original work and scholarship.",
        "Proper citation is essential in academic writing.",
    ]
)
