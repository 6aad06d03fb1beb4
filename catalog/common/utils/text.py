def like_pattern(term: str) -> str:
    """Mẫu LIKE "chứa term", escape các ký tự đại diện (dùng với escape="\\")."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
