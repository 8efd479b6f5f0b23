from __future__ import annotations
import os

# where the page fetches the precomputed index from
INDEX_PATH: str = "/index.json"
INDEX_ACCEPT: str = "application/json"

# matcher
TOP_K: int = 5
TITLE_SCORE_BASE: int = 1000   # title hit at position i scores 1000 - i
BODY_SCORE_BASE: int = 100     # body hit at position i scores 100 - min(i, 100)

# controller
DEBOUNCE_MS: int = 200
INPUT_ID: str = "tinysearch"
LIST_ID_SUFFIX: str = "-autocomplete-list"
OPTION_ID_INFIX: str = "-option-"
QUERY_PARAM: str = "q"

# rendering
LIST_CLASS: str = "autocomplete-items"
ACTIVE_CLASS: str = "autocomplete-active"
EMPTY_CLASS: str = "no-results"
EMPTY_TEXT: str = "No results"
MARK_TAG: str = "mark"

# verbose logging (set TINYSEARCH_VERBOSE=1 to enable)
VERBOSE: bool = os.environ.get("TINYSEARCH_VERBOSE") == "1"
