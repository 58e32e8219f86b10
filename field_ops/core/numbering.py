"""Quote and invoice numbers: ``{prefix}{sequence:04d}``."""

SEQUENCE_WIDTH = 4


def format_document_number(prefix: str, sequence: int, width: int = SEQUENCE_WIDTH) -> str:
    if sequence < 1:
        raise ValueError("sequence must be positive")
    return f"{prefix}{sequence:0{width}d}"
