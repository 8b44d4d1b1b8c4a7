# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.constants import ExternalURIs
from util.enums import Environment


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(
        default="http://localhost:3000", validation_alias="ALLOWED_ORIGIN"
    )
    MAX_FILE_MB: int = Field(default=20, validation_alias="MAX_FILE_MB")

    # Upstage Settings
    UPSTAGE_CHAT_URL: str = Field(
        default=ExternalURIs.UPSTAGE_CHAT, validation_alias="UPSTAGE_CHAT_URL"
    )
    UPSTAGE_OCR_URL: str = Field(
        default=ExternalURIs.UPSTAGE_OCR, validation_alias="UPSTAGE_OCR_URL"
    )
    UPSTAGE_MODEL: str = Field(default="solar-pro3", validation_alias="UPSTAGE_MODEL")
    UPSTAGE_OCR_MODEL: str = Field(default="ocr", validation_alias="UPSTAGE_OCR_MODEL")
    UPSTAGE_TEMPERATURE: float = Field(
        default=0.2, validation_alias="UPSTAGE_TEMPERATURE"
    )
    HTTP_TIMEOUT_SECONDS: float = Field(
        default=90.0, validation_alias="HTTP_TIMEOUT_SECONDS"
    )

    # Prompt sizes
    MAX_INPUT_CHARS: int = 12000
    TRUNCATION_MARKER: str = "[Text was too long; only the beginning was analyzed]"
    PRIMARY_MAX_PER_CATEGORY: int = 4
    PRIMARY_MAX_EXAMPLE_CHARS: int = 240
    PRIMARY_MAX_TOKENS: int = 1400
    ESCALATED_MAX_PER_CATEGORY: int = 2
    ESCALATED_MAX_EXAMPLE_CHARS: int = 160
    ESCALATED_MAX_TOKENS: int = 900
    REPAIR_MAX_TOKENS: int = 900
    ERROR_PREVIEW_CHARS: int = 400

    # Local text analysis
    SENTENCE_LIMIT: int = 250
    MIN_SENTENCE_CHARS: int = 25
    LEXICON_TOP_N: int = 40
    MIN_CITATION_CHARS: int = 20
    FUZZY_PREFIX_CHARS: int = 60
    MIN_FUZZY_PREFIX_CHARS: int = 25
    MIN_TEXT_LAYER_CHARS: int = 200
    LINE_Y_TOLERANCE: float = 2.6

    # Logging knobs
    LOGGER_NAME: str = "expression-learner"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    # Prompts ($-placeholders are filled with string.Template)
    ANALYSIS_PROMPT_TEMPLATE: str = (
        "You are an expert in academic paper writing. From the paper text below, extract only "
        '"expressions" that are useful for learning English academic writing.\n'
        "\n"
        "## Categories\n"
        "1. Research background - growing interest, emphasising importance\n"
        "2. Research gap - limits of prior work, open problems\n"
        "3. Aims / hypotheses - stating the goal\n"
        "4. Methodology - design, data collection, analysis\n"
        "5. Results - findings, statistical significance\n"
        "6. Interpretation / discussion - meaning, comparison with prior work\n"
        "7. Limitations - acknowledging constraints\n"
        "8. Future work - directions for follow-up research\n"
        "\n"
        "## Output format\n"
        "Output ONLY the JSON below. Do not add any other explanation.\n"
        "\n"
        "$schema\n"
        "\n"
        "## Paper text\n"
        "$document_text\n"
        "\n"
        "## Notes\n"
        "- Extract at least 1 and at most $max_per_category expressions per category\n"
        "- Only extract expressions actually used in the paper\n"
        "- Write usage explanations in Korean so they help the learner\n"
        "- Keep each example under $max_example_chars characters\n"
        "- Output JSON only, with no other text\n"
    )

    REPAIR_PROMPT_TEMPLATE: str = (
        "The text below was supposed to be a single JSON object but it is malformed or cut off.\n"
        "Rewrite it as ONE valid JSON object that follows this schema exactly:\n"
        "\n"
        "$schema\n"
        "\n"
        "Rules:\n"
        "- Keep the original content; drop any entry that was cut off mid-way.\n"
        "- No code fences, no comments, no prose before or after the JSON.\n"
        "\n"
        "## Malformed output\n"
        "$broken_output\n"
    )

    RECORD_SCHEMA: str = (
        "{\n"
        '  "sections": [\n'
        "    {\n"
        '      "category": "category name (Korean)",\n'
        '      "category_en": "Category Name in English",\n'
        '      "expressions": [\n'
        "        {\n"
        '          "expression": "extracted expression (e.g. Despite extensive research on X, ...)",\n'
        '          "usage": "when to use it (Korean)",\n'
        '          "example": "the actual sentence from the paper",\n'
        '          "difficulty": "basic|intermediate|advanced"\n'
        "        }\n"
        "      ]\n"
        "    }\n"
        "  ],\n"
        '  "academic_verbs": [],\n'
        '  "transition_words": []\n'
        "}"
    )


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
