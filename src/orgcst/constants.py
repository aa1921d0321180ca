#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the orgcst library.

This module centralizes the fixed parts of the Org grammar and the default
option values used across the library.

Constants are organized by category:
1. Type Definitions - All Literal types and type aliases
2. Parser and Serializer Defaults - Values backing the option dataclasses
3. Element Grammar - Block names, affiliated keywords, special titles
4. Object Grammar - Emphasis borders, link types, entities
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions - All Literal Types and Type Aliases
# =============================================================================

Granularity = Literal["headline", "element", "object"]
TodoType = Literal["todo", "done"]
CheckboxState = Literal["on", "off", "trans"]
ListType = Literal["ordered", "unordered", "descriptive"]
TimestampType = Literal["active", "active-range", "inactive", "inactive-range", "diary"]
RepeaterType = Literal["cumulate", "catch-up", "restart"]
WarningType = Literal["all", "first"]
TimeUnit = Literal["hour", "day", "week", "month", "year"]
TableRowType = Literal["standard", "rule"]
TableType = Literal["org", "table.el"]
ClockStatus = Literal["running", "closed"]
LinkFormat = Literal["bracket", "angle", "plain"]

# =============================================================================
# Parser and Serializer Defaults
# =============================================================================

DEFAULT_ORG_TODO_KEYWORDS = ["TODO", "DONE"]
DEFAULT_MAX_NESTING_DEPTH = 128
DEFAULT_GRANULARITY: Granularity = "object"
DEFAULT_TAGS_COLUMN = 77

# In-buffer keywords that redefine the TODO sequence for one document
TODO_SEQUENCE_KEYWORDS = frozenset({"TODO", "SEQ_TODO", "TYP_TODO"})

# =============================================================================
# Element Grammar
# =============================================================================

# Blocks whose bodies are never classified or object-parsed line by line
VERBATIM_BLOCKS = frozenset({"SRC", "EXAMPLE", "EXPORT", "COMMENT", "VERSE"})

# Blocks that contain elements and have a dedicated node kind
GREATER_BLOCKS = frozenset({"CENTER", "QUOTE"})

AFFILIATED_KEYWORDS = frozenset(
    {
        "CAPTION",
        "DATA",
        "HEADER",
        "HEADERS",
        "LABEL",
        "NAME",
        "PLOT",
        "RESNAME",
        "RESULT",
        "RESULTS",
        "SOURCE",
        "SRCNAME",
        "TBLNAME",
    }
)

AFFILIATED_TRANSLATIONS = {
    "DATA": "NAME",
    "LABEL": "NAME",
    "RESNAME": "NAME",
    "SOURCE": "NAME",
    "SRCNAME": "NAME",
    "TBLNAME": "NAME",
    "RESULT": "RESULTS",
    "HEADERS": "HEADER",
}

# Affiliated keywords accepting a "[secondary]" value after the key
DUAL_KEYWORDS = frozenset({"CAPTION", "RESULTS"})

# Keywords whose value holds objects rather than a raw string
PARSED_KEYWORDS = frozenset({"AUTHOR", "DATE", "TITLE"})

PLANNING_KEYWORDS = ("CLOSED", "DEADLINE", "SCHEDULED")

COMMENT_KEYWORD = "COMMENT"
ARCHIVE_TAG = "ARCHIVE"
FOOTNOTE_SECTION_TITLE = "Footnotes"

# =============================================================================
# Object Grammar
# =============================================================================

# Characters besides whitespace allowed right before an opening emphasis marker
EMPHASIS_PRE_CHARS = frozenset("-('\"{")

# Characters besides whitespace allowed right after a closing emphasis marker
EMPHASIS_POST_CHARS = frozenset("-.,;:!?'\")}\\[")

EMPHASIS_MARKERS = {
    "*": "bold",
    "/": "italic",
    "_": "underline",
    "+": "strike_through",
    "~": "code",
    "=": "verbatim",
}

LINK_TYPES = (
    "attachment",
    "bbdb",
    "docview",
    "doi",
    "elisp",
    "file",
    "file+emacs",
    "file+sys",
    "ftp",
    "gnus",
    "help",
    "http",
    "https",
    "id",
    "info",
    "irc",
    "mailto",
    "news",
    "rmail",
    "shell",
)

ORG_ENTITIES = {
    # Letters
    "Agrave": "À",
    "agrave": "à",
    "Aacute": "Á",
    "aacute": "á",
    "Acirc": "Â",
    "acirc": "â",
    "Atilde": "Ã",
    "atilde": "ã",
    "Auml": "Ä",
    "auml": "ä",
    "Aring": "Å",
    "aring": "å",
    "AElig": "Æ",
    "aelig": "æ",
    "Ccedil": "Ç",
    "ccedil": "ç",
    "Egrave": "È",
    "egrave": "è",
    "Eacute": "É",
    "eacute": "é",
    "Ecirc": "Ê",
    "ecirc": "ê",
    "Euml": "Ë",
    "euml": "ë",
    "Igrave": "Ì",
    "igrave": "ì",
    "Iacute": "Í",
    "iacute": "í",
    "Icirc": "Î",
    "icirc": "î",
    "Iuml": "Ï",
    "iuml": "ï",
    "Ntilde": "Ñ",
    "ntilde": "ñ",
    "Ograve": "Ò",
    "ograve": "ò",
    "Oacute": "Ó",
    "oacute": "ó",
    "Ocirc": "Ô",
    "ocirc": "ô",
    "Otilde": "Õ",
    "otilde": "õ",
    "Ouml": "Ö",
    "ouml": "ö",
    "Oslash": "Ø",
    "oslash": "ø",
    "OElig": "Œ",
    "oelig": "œ",
    "Scaron": "Š",
    "scaron": "š",
    "szlig": "ß",
    "Ugrave": "Ù",
    "ugrave": "ù",
    "Uacute": "Ú",
    "uacute": "ú",
    "Ucirc": "Û",
    "ucirc": "û",
    "Uuml": "Ü",
    "uuml": "ü",
    "Yacute": "Ý",
    "yacute": "ý",
    "Yuml": "Ÿ",
    "yuml": "ÿ",
    "fnof": "ƒ",
    "real": "ℜ",
    "image": "ℑ",
    "weierp": "℘",
    "ell": "ℓ",
    "imath": "ı",
    "jmath": "ȷ",
    # Greek
    "Alpha": "Α",
    "alpha": "α",
    "Beta": "Β",
    "beta": "β",
    "Gamma": "Γ",
    "gamma": "γ",
    "Delta": "Δ",
    "delta": "δ",
    "Epsilon": "Ε",
    "epsilon": "ε",
    "varepsilon": "ε",
    "Zeta": "Ζ",
    "zeta": "ζ",
    "Eta": "Η",
    "eta": "η",
    "Theta": "Θ",
    "theta": "θ",
    "thetasym": "ϑ",
    "vartheta": "ϑ",
    "Iota": "Ι",
    "iota": "ι",
    "Kappa": "Κ",
    "kappa": "κ",
    "Lambda": "Λ",
    "lambda": "λ",
    "Mu": "Μ",
    "mu": "μ",
    "nu": "ν",
    "Nu": "Ν",
    "Xi": "Ξ",
    "xi": "ξ",
    "Omicron": "Ο",
    "omicron": "ο",
    "Pi": "Π",
    "pi": "π",
    "Rho": "Ρ",
    "rho": "ρ",
    "Sigma": "Σ",
    "sigma": "σ",
    "sigmaf": "ς",
    "varsigma": "ς",
    "Tau": "Τ",
    "tau": "τ",
    "Upsilon": "Υ",
    "upsilon": "υ",
    "Phi": "Φ",
    "phi": "ɸ",
    "varphi": "φ",
    "Chi": "Χ",
    "chi": "χ",
    "Psi": "Ψ",
    "psi": "ψ",
    "Omega": "Ω",
    "omega": "ω",
    "piv": "ϖ",
    "varpi": "ϖ",
    "partial": "∂",
    # Hebrew
    "alefsym": "ℵ",
    "aleph": "ℵ",
    "gimel": "ℷ",
    "beth": "ב",
    "dalet": "ד",
    # Dashes, quotes and spacing
    "ndash": "–",
    "mdash": "—",
    "hellip": "…",
    "dots": "…",
    "laquo": "«",
    "raquo": "»",
    "lsquo": "‘",
    "rsquo": "’",
    "ldquo": "“",
    "rdquo": "”",
    "sbquo": "‚",
    "bdquo": "„",
    "nbsp": " ",
    "ensp": " ",
    "emsp": " ",
    "thinsp": " ",
    "shy": "­",
    # Currency and misc symbols
    "cent": "¢",
    "pound": "£",
    "yen": "¥",
    "euro": "€",
    "EUR": "€",
    "dollar": "$",
    "copy": "©",
    "reg": "®",
    "trade": "™",
    "sect": "§",
    "para": "¶",
    "dagger": "†",
    "Dagger": "‡",
    "bull": "•",
    "bullet": "•",
    "star": "⋆",
    "deg": "°",
    "permil": "‰",
    "micro": "µ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "vert": "|",
    "vbar": "|",
    "brvbar": "¦",
    "iexcl": "¡",
    "iquest": "¿",
    "check": "✓",
    # Math
    "pm": "±",
    "plusmn": "±",
    "times": "×",
    "div": "÷",
    "frac12": "½",
    "frac14": "¼",
    "frac34": "¾",
    "sup1": "¹",
    "sup2": "²",
    "sup3": "³",
    "neg": "¬",
    "not": "¬",
    "minus": "−",
    "lowast": "∗",
    "sdot": "⋅",
    "cdot": "⋅",
    "radic": "√",
    "sqrt": "√",
    "infin": "∞",
    "infty": "∞",
    "prop": "∝",
    "propto": "∝",
    "ang": "∠",
    "angle": "∠",
    "and": "∧",
    "wedge": "∧",
    "or": "∨",
    "vee": "∨",
    "cap": "∩",
    "cup": "∪",
    "int": "∫",
    "sum": "∑",
    "prod": "∏",
    "there4": "∴",
    "therefore": "∴",
    "sim": "∼",
    "cong": "≅",
    "asymp": "≈",
    "approx": "≈",
    "ne": "≠",
    "neq": "≠",
    "equiv": "≡",
    "le": "≤",
    "leq": "≤",
    "ge": "≥",
    "geq": "≥",
    "sub": "⊂",
    "subset": "⊂",
    "sup": "⊃",
    "supset": "⊃",
    "sube": "⊆",
    "subseteq": "⊆",
    "supe": "⊇",
    "supseteq": "⊇",
    "isin": "∈",
    "in": "∈",
    "notin": "∉",
    "ni": "∋",
    "empty": "∅",
    "emptyset": "∅",
    "nabla": "∇",
    "forall": "∀",
    "exist": "∃",
    "exists": "∃",
    "oplus": "⊕",
    "otimes": "⊗",
    "perp": "⊥",
    "lceil": "⌈",
    "rceil": "⌉",
    "lfloor": "⌊",
    "rfloor": "⌋",
    "lang": "⟨",
    "rang": "⟩",
    "langle": "⟨",
    "rangle": "⟩",
    # Arrows
    "larr": "←",
    "leftarrow": "←",
    "gets": "←",
    "rarr": "→",
    "rightarrow": "→",
    "to": "→",
    "uarr": "↑",
    "uparrow": "↑",
    "darr": "↓",
    "downarrow": "↓",
    "harr": "↔",
    "leftrightarrow": "↔",
    "lArr": "⇐",
    "Leftarrow": "⇐",
    "rArr": "⇒",
    "Rightarrow": "⇒",
    "hArr": "⇔",
    "Leftrightarrow": "⇔",
    "crarr": "↵",
    "mapsto": "↦",
    # Smilies and card suits
    "smile": "⌣",
    "frown": "⌢",
    "smiley": "☺",
    "sad": "☹",
    "clubs": "♣",
    "spades": "♠",
    "hearts": "♥",
    "diams": "◆",
}
