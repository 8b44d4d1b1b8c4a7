# core/export.py
from typing import List, Optional
from model.analysis import AnalysisRecord, CitationModel
from util.enums import Difficulty

DIFFICULTY_MARKS = {
    Difficulty.basic.value: "🟢",
    Difficulty.intermediate.value: "🟡",
    Difficulty.advanced.value: "🔴",
}
UNKNOWN_MARK = "⚪"


def format_citation(c: Optional[CitationModel]) -> str:
    """'p. 3, line 12' or 'p. 3, line 12–14'; empty when there is no citation."""
    if c is None:
        return ""
    lines = f"{c.lineStart}"
    if c.lineEnd and c.lineEnd != c.lineStart:
        lines = f"{c.lineStart}–{c.lineEnd}"
    return f"p. {c.page}, line {lines}"


def _cell(text: str) -> str:
    # Pipes and newlines would break the markdown table row
    return (text or "").replace("|", "\\|").replace("\n", " ")


def to_markdown(record: AnalysisRecord) -> str:
    md: List[str] = [
        "# Academic Expression Learner",
        "",
        "> Academic expressions, verbs and transitions extracted from a paper PDF.",
        "",
        "---",
        "",
        "## Difficulty",
        "- 🟢 Basic",
        "- 🟡 Intermediate",
        "- 🔴 Advanced",
        "",
        "---",
        "",
    ]

    for section in record.sections:
        md += [f"## 📌 {section.category}", f"*{section.category_en}*", ""]
        for expr in section.expressions:
            mark = DIFFICULTY_MARKS.get(expr.difficulty or "", UNKNOWN_MARK)
            md.append(f"### {mark} `{expr.expression}`")
            md.append(f"- **Usage**: {expr.usage}")
            md.append(f"- **Example**: _{expr.example}_")
            if expr.citation:
                md.append(f"- **Citation**: {format_citation(expr.citation)}")
            md.append("")

    if record.academic_verbs:
        md += ["---", "", "## 📚 Academic verbs", ""]
        md += ["| Verb | Meaning | Example |", "|:-----|:-----|:-----|"]
        for v in record.academic_verbs:
            md.append(f"| **{_cell(v.verb)}** | {_cell(v.meaning)} | {_cell(v.example)} |")
        md.append("")

    if record.transition_words:
        md += ["---", "", "## 🔗 Transitions", ""]
        md += ["| Expression | Usage | Example |", "|:-----|:---------|:-----|"]
        for t in record.transition_words:
            md.append(f"| **{_cell(t.word)}** | {_cell(t.usage)} | {_cell(t.example)} |")
        md.append("")

    return "\n".join(md)


def _anki_field(text: str) -> str:
    # Anki's TSV import treats tabs as column breaks; newlines are kept as <br>
    return text.replace("\t", " ").replace("\n", "<br>")


def to_anki_tsv(record: AnalysisRecord) -> str:
    """
    One front<TAB>back row per expression, verb and transition.
    """
    rows: List[str] = []
    for section in record.sections:
        for expr in section.expressions:
            front = f"📖 {expr.expression}\n\nWhen is it used?"
            back = f"✅ {expr.usage}\n\n📝 Example:\n{expr.example}\n\n📂 Category: {section.category}"
            if expr.citation:
                back += f"\n📍 {format_citation(expr.citation)}"
            rows.append(f"{_anki_field(front)}\t{_anki_field(back)}")

    for v in record.academic_verbs:
        front = f"🔤 Academic Verb: {v.verb}\n\nMeaning?"
        back = f"✅ {v.meaning}\n\n📝 Example: {v.example}"
        rows.append(f"{_anki_field(front)}\t{_anki_field(back)}")

    for t in record.transition_words:
        front = f"🔗 Transition: {t.word}\n\nWhen is it used?"
        back = f"✅ {t.usage}\n\n📝 Example: {t.example}"
        rows.append(f"{_anki_field(front)}\t{_anki_field(back)}")

    return "\n".join(rows)
