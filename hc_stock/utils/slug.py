import re

# Vietnamese vowels with every tone mark, grouped by base letter
_VIETNAMESE_MAP = {
    'a': 'àáạảãâầấậẩẫăằắặẳẵ',
    'e': 'èéẹẻẽêềếệểễ',
    'i': 'ìíịỉĩ',
    'o': 'òóọỏõôồốộổỗơờớợởỡ',
    'u': 'ùúụủũưừứựửữ',
    'y': 'ỳýỵỷỹ',
    'd': 'đ',
}

_TRANSLATION = str.maketrans({
    accented: base
    for base, chars in _VIETNAMESE_MAP.items()
    for accented in chars
})


def strip_diacritics(text: str) -> str:
    """Replace Vietnamese accented lowercase letters with their ASCII base."""
    return text.lower().translate(_TRANSLATION)


def slugify(text: str) -> str:
    """
    Build a URL-safe slug from a Vietnamese title.

    Example:
        slugify("Chứng khoán Việt Nam") -> "chung-khoan-viet-nam"
    """
    slug = strip_diacritics(text)
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'[^a-z0-9_\-]+', '', slug)
    slug = re.sub(r'-{2,}', '-', slug)
    return slug.strip('-')
