import re


# "* **Product 1** - **100 SAR**" / "- **Name**: 100 SAR"
_PRODUCT_BULLET_RE = re.compile(
    r"^\s*(?:[-*•]\s*)?\*\*[^*\n]+\*\*\s*[-–—:|]\s*(?:\*\*[^*\n]+\*\*|[\d.,]+\s*SAR)\s*$",
    re.IGNORECASE,
)
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def clean_product_list_text(text: str) -> str:
    """Drop markdown bullet lines that repeat the product cards."""

    kept = [line.strip() for line in (text or "").splitlines() if not _PRODUCT_BULLET_RE.match(line)]
    return _BLANK_RUN_RE.sub("\n\n", "\n".join(kept)).strip()
