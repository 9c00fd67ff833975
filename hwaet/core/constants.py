"""
Core Constants Module.

This module defines constants and configuration values used across the application.
"""

# Oracle configuration
DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 120  # seconds
DEFAULT_TEMPERATURE = 0.1
DEFAULT_THINKING_BUDGET = 0

# Environment variables read by GlossConfig.from_env()
ENV_API_KEYS = ("GEMINI_API_KEY", "API_KEY")
ENV_MODEL = "HWAET_MODEL"
ENV_MAX_LINES = "HWAET_MAX_LINES"

# Segmentation
DEFAULT_MAX_LINES = 12

# Context extraction
DEFAULT_CONTEXT_RADIUS = 10
SENTENCE_TERMINATORS = ".?!"

# Line-break sentinel token
LINE_BREAK = "\n"
ESCAPED_LINE_BREAK = "\\n"
LINE_BREAK_FIELDS = {
    "modernTranslation": "Line Break",
    "lemma": "N/A",
    "partOfSpeech": "Formatting",
    "grammaticalInfo": "N/A",
    "etymology": "N/A",
}

# Punctuation classes for attachment
NEUTRAL_QUOTE = '"'
OPENERS = frozenset(["(", "[", "{", "“", "‘", "#", "$", "¿", "¡", "<"])
DASHES = frozenset(["-", "–", "—"])
AMPERSAND = "&"

# Spacing classes used by the HTML gloss view
SPACING_CLASSES = {
    "default": "mr-1.5",
    "cancel_both": "-mr-2",
    "cancel_one": "-mr-1.5",
    "flush": "mr-0",
    "line_break": "w-full h-4 block basis-full",
}

# Export
EXPORT_FILENAME_TEMPLATE = "hwæt_analysis_{date}.json"
STUDY_CSV_FILENAME = "old_english_study_list.csv"
STUDY_CSV_HEADERS = ["Lemma (Root)", "Context Sentence (Front)", "Definition & Grammar (Back)"]

# Dictionary lookups
DICTIONARY_URLS = {
    "Bosworth-Toller": "https://bosworthtoller.com/search?q={lemma}",
    "Wiktionary": "https://en.wiktionary.org/wiki/{lemma}#Old_English",
}

# Error messages
ERROR_ANALYSIS_FAILED = "Failed to analyze text. Please try again or check your API configuration."
ERROR_DEEP_ANALYSIS_FAILED = "The deep search encountered a storm in the North Sea. Please try again later."
ERROR_API_KEY_MISSING = "API Key is missing."
ERROR_INVALID_IMPORT = "Invalid file format. Please upload a JSON file exported from this tool."
