r"""
Escape text for use inside a markdown table cell.

A `|` ends the cell and a line break ends the row, both must be neutralized.
Other markdown characters are left alone, so behavior names like
`v2025_01_01.feature-x` stay readable.

Example input:
```
auth|tokens
multi
line
```

Escaped output:
```
auth\|tokens
multi line
```
"""

def escape_table_cell(text: str) -> str:
    # Backslash first, so the escapes added below are not escaped again.
    replacements = [
        ("\\", "\\\\"),
        ("|", "\\|"),
        ("\r\n", " "),
        ("\n", " "),
        ("\r", " "),
    ]

    for old, new in replacements:
        text = text.replace(old, new)

    return text
