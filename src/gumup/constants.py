"""Constants shared across gumup.

Unit and requirement name grammar:

    unitName     : IDENTIFIER ( '.' IDENTIFIER )*
    requireName  : unitName ( '.' '*' )? | '*'
    IDENTIFIER   : [A-Za-z_$] [A-Za-z0-9_$]*
"""

import re

# -----------------------------------------------------------------------------
# Name Grammar
# -----------------------------------------------------------------------------

_IDENTIFIER = r"[A-Za-z_$][A-Za-z0-9_$]*"

UNIT_NAME_PATTERN: re.Pattern[str] = re.compile(rf"^{_IDENTIFIER}(?:\.{_IDENTIFIER})*$")

REQUIRE_NAME_PATTERN: re.Pattern[str] = re.compile(
    rf"^(?:{_IDENTIFIER}(?:\.{_IDENTIFIER})*(?:\.\*)?|\*)$"
)

# Requirement matching every declared unit
GLOBAL_WILDCARD: str = "*"

# Suffix of a prefix-wildcard requirement (`foo.*`)
PREFIX_WILDCARD_SUFFIX: str = ".*"

NAME_SEPARATOR: str = "."


# -----------------------------------------------------------------------------
# Build Mode
# -----------------------------------------------------------------------------

DEFAULT_SUFFIX: str = ".js"

DEFAULT_ENCODING: str = "utf-8"

DEFAULT_SEPARATOR: str = "\n"

# Header directives: `// @unit app.view`, `# @require app.model.*`
HEADER_DIRECTIVE_PATTERN: re.Pattern[str] = re.compile(
    r"^[^\w@\n]*@(unit|require)[ \t]+(\S+)", re.MULTILINE
)

VERSION: str = "0.4.0"
